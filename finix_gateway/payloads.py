"""Request bodies sent to the Finix API.

One record per operation, with required fields first so that an incomplete
body fails when it is built rather than at the processor. `to_dict()` drops
optional fields that were left unset.
"""
from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
from typing import Dict
from typing import List
from typing import Optional

from finix_gateway.util import clean_params


TOKEN = 'TOKEN'
APPLE_PAY = 'APPLE_PAY'
GOOGLE_PAY = 'GOOGLE_PAY'

INSTRUMENT_TYPES = (TOKEN, APPLE_PAY, GOOGLE_PAY)
WALLET_TYPES = (APPLE_PAY, GOOGLE_PAY)


def _check_minor_units(amount):
  if isinstance(amount, bool) or not isinstance(amount, int):
    raise ValueError('Amounts are integers in minor units, got %r.' % (amount,))


class _Payload(object):
  def to_dict(self):
    return clean_params(asdict(self))


@dataclass
class Address(_Payload):
  country: str
  city: str = ''
  line1: str = ''
  line2: str = ''
  postal_code: str = ''
  region: str = ''


@dataclass
class IdentityEntity(_Payload):
  email: str
  first_name: str
  last_name: str
  personal_address: Address
  phone: str = ''


@dataclass
class CreateIdentityRequest(_Payload):
  entity: IdentityEntity
  tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class CreateInstrumentRequest(_Payload):
  """Card/bank tokens send `token`; wallets send `third_party_token` and the
  merchant identity the wallet token was issued for."""
  type: str
  identity: str
  name: str = ''
  token: Optional[str] = None
  third_party_token: Optional[str] = None
  merchant_identity: Optional[str] = None
  tags: Dict[str, str] = field(default_factory=dict)

  def __post_init__(self):
    if not self.identity:
      raise ValueError('A payment instrument requires the buyer `identity`.')
    if self.type not in INSTRUMENT_TYPES:
      raise ValueError('Unsupported payment instrument type: %r' % (self.type,))
    if self.type == TOKEN:
      if self.token is None:
        raise ValueError('A TOKEN instrument requires `token`.')
      if self.third_party_token is not None or self.merchant_identity is not None:
        raise ValueError('A TOKEN instrument cannot carry wallet fields.')
    else:
      if self.third_party_token is None or self.merchant_identity is None:
        raise ValueError(
            'A %s instrument requires `third_party_token` and `merchant_identity`.'
            % self.type)
      if self.token is not None:
        raise ValueError('A %s instrument cannot carry `token`.' % self.type)


@dataclass
class CreateTransferRequest(_Payload):
  amount: int
  currency: str
  source: str
  merchant: str
  fraud_session_id: Optional[str] = None
  tags: Dict[str, str] = field(default_factory=dict)

  def __post_init__(self):
    _check_minor_units(self.amount)


@dataclass
class UpdateTransferRequest(_Payload):
  tags: Dict[str, str]


@dataclass
class CreateReversalRequest(_Payload):
  amount: int
  idempotency_id: str
  tags: Dict[str, str] = field(default_factory=dict)

  def __post_init__(self):
    _check_minor_units(self.amount)


@dataclass
class ApplePaySessionRequest(_Payload):
  display_name: str
  domain: str
  merchant_identity: str
  validation_url: str


@dataclass
class Domain(_Payload):
  name: str
  enabled: bool = True


@dataclass
class DomainRegistrationRequest(_Payload):
  merchant_identity: str
  domains: List[Domain]
  type: str = APPLE_PAY
