import os


class Settings(object):
  """Gateway settings as persisted by the storefront.

  Holds one Basic-auth pair per mode, the merchant ids used to route
  transfers, and the `source` tag stamped on every resource. The library only
  ever reads these values.
  """

  SANDBOX = 'sandbox'
  LIVE = 'live'

  DEFAULTS = {
      'testmode': SANDBOX,
      'test_username': '',
      'test_password': '',
      'live_username': '',
      'live_password': '',
      'test_merchant_id': '',
      'live_merchant_id': '',
      'test_merchant_id_cad': '',
      'live_merchant_id_cad': '',
      'alternate_currency': 'CAD',
      'custom_source_tag': 'woocommerce',
      'timeout': 15,
  }

  def __init__(self, **options):
    unknown = set(options) - set(self.DEFAULTS)
    if unknown:
      raise ValueError('Unknown settings: %s' % ', '.join(sorted(unknown)))
    for key, default in self.DEFAULTS.items():
      value = options.get(key)
      setattr(self, key, default if value is None else value)
    self.timeout = float(self.timeout)

  @classmethod
  def from_options(cls, options):
    """Build settings from the storefront's option mapping, ignoring extras."""
    options = options or {}
    return cls(**dict((key, options[key]) for key in cls.DEFAULTS if key in options))

  @classmethod
  def from_env(cls, environ=None, prefix='FINIX_'):
    """Build settings from `FINIX_TEST_USERNAME`-style environment variables."""
    environ = os.environ if environ is None else environ
    options = {}
    for key in cls.DEFAULTS:
      name = prefix + key.upper()
      if name in environ:
        options[key] = environ[name]
    return cls(**options)

  @property
  def is_sandbox_mode(self):
    return self.testmode == self.SANDBOX

  @property
  def username(self):
    return self.test_username if self.is_sandbox_mode else self.live_username

  @property
  def password(self):
    return self.test_password if self.is_sandbox_mode else self.live_password

  @property
  def merchant_id(self):
    return self.test_merchant_id if self.is_sandbox_mode else self.live_merchant_id

  @property
  def merchant_id_alternate(self):
    if self.is_sandbox_mode:
      return self.test_merchant_id_cad
    return self.live_merchant_id_cad

  def merchant_id_for_currency(self, currency):
    """Transfers in the alternate currency settle into their own merchant."""
    if currency == self.alternate_currency:
      return self.merchant_id_alternate
    return self.merchant_id

  def __repr__(self):
    return '<Settings mode=%s merchant=%s>' % (self.testmode, self.merchant_id)
