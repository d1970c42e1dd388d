"""Read-only view of the storefront the gateway is embedded in.

The library never talks to the store's database itself. Integrations subclass
`Storefront` and override the hooks they can answer; the defaults describe an
anonymous visitor in a USD store with no orders.
"""
from dataclasses import dataclass
from dataclasses import field
from typing import List
from typing import Optional


@dataclass
class BillingDetails(object):
  email: str = ''
  first_name: str = ''
  last_name: str = ''
  phone: str = ''
  address_1: str = ''
  address_2: str = ''
  city: str = ''
  state: str = ''
  postcode: str = ''
  country: str = ''

  @property
  def full_name(self):
    return ' '.join(part for part in (self.first_name, self.last_name) if part)


@dataclass
class Order(object):
  id: int
  billing: BillingDetails = field(default_factory=BillingDetails)
  date_created: Optional[str] = None
  customer_id: int = 0
  currency: str = 'USD'
  total: str = '0'
  coupon_codes: List[str] = field(default_factory=list)


class Storefront(object):
  def get_order(self, order_id):
    return None

  def find_user_id_by_email(self, email):
    return 0

  def get_current_user_id(self):
    return 0

  def get_currency(self):
    return 'USD'

  def get_request_environ(self):
    """Server variables of the request being handled (WSGI environ style)."""
    return {}
