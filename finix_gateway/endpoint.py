from urllib.parse import quote
from urllib.parse import urljoin


class Endpoint(object):
  """Finix API endpoints for one environment.

  `base_url` is the sandbox or live API root. Wallet domain registration lives
  under a configuration root that is tracked separately so it can move
  independently of the main API.

  https://finix.com/docs/api/overview/
  """

  TRANSFERS = ('transfers',)
  TRANSFER = ('transfers', '{}')
  TRANSFER_REVERSALS = ('transfers', '{}', 'reversals')
  IDENTITIES = ('identities',)
  PAYMENT_INSTRUMENTS = ('payment_instruments',)
  APPLE_PAY_SESSIONS = ('apple_pay_sessions',)
  MERCHANT = ('merchants', '{}')
  PAYMENT_METHOD_CONFIGURATIONS = ('payment_method_configurations',)

  def __init__(self, base_url, config_url=None):
    self.base_url = base_url
    self.config_url = config_url or base_url

  def _build(self, root, template, *args):
    args = iter(args)
    parts = [next(args) if part == '{}' else part for part in template]
    if not root.endswith('/'):
      root += '/'
    return urljoin(root, '/'.join(quote(str(part), safe='') for part in parts))

  def transfers(self):
    return self._build(self.base_url, self.TRANSFERS)

  def transfer(self, transfer_id):
    return self._build(self.base_url, self.TRANSFER, transfer_id)

  def transfer_reversals(self, transfer_id):
    return self._build(self.base_url, self.TRANSFER_REVERSALS, transfer_id)

  def identities(self):
    return self._build(self.base_url, self.IDENTITIES)

  def payment_instruments(self):
    return self._build(self.base_url, self.PAYMENT_INSTRUMENTS)

  def apple_pay_sessions(self):
    return self._build(self.base_url, self.APPLE_PAY_SESSIONS)

  def merchant(self, merchant_id):
    return self._build(self.base_url, self.MERCHANT, merchant_id)

  def payment_method_configurations(self):
    return self._build(self.config_url, self.PAYMENT_METHOD_CONFIGURATIONS)
