import functools
import json
import re

import httpretty as hp

from finix_gateway.client import Client
from finix_gateway.settings import Settings
from finix_gateway.storefront import BillingDetails
from finix_gateway.storefront import Order
from finix_gateway.storefront import Storefront


# Dummy credentials and ids for use in tests
username = 'USfakeuser'
password = 'fakepassword'
merchant_id = 'MUdefault'
merchant_id_cad = 'MUcanada'


def make_settings(**overrides):
  options = {
      'testmode': 'sandbox',
      'test_username': username,
      'test_password': password,
      'test_merchant_id': merchant_id,
      'test_merchant_id_cad': merchant_id_cad,
      'custom_source_tag': 'teststore',
  }
  options.update(overrides)
  return Settings(**options)


def make_client(storefront=None, **overrides):
  return Client(make_settings(**overrides), storefront=storefront)


def make_order(**overrides):
  billing = BillingDetails(
      email='jane@example.com',
      first_name='Jane',
      last_name='Doe',
      phone='5551234567',
      address_1='1 Main St',
      address_2='Apt 2',
      city='Springfield',
      state='IL',
      postcode='62701',
      country='US')
  fields = {
      'id': 1042,
      'billing': billing,
      'date_created': '2024-05-01 10:00:00',
      'customer_id': 7,
      'currency': 'USD',
      'total': '10.00',
  }
  fields.update(overrides)
  return Order(**fields)


class FakeStorefront(Storefront):
  def __init__(self, orders=None, users=None, current_user_id=0, currency='USD',
               environ=None):
    self.orders = dict((order.id, order) for order in orders or [])
    self.users = users or {}
    self.current_user_id = current_user_id
    self.currency = currency
    self.environ = environ or {}

  def get_order(self, order_id):
    return self.orders.get(order_id)

  def find_user_id_by_email(self, email):
    return self.users.get(email, 0)

  def get_current_user_id(self):
    return self.current_user_id

  def get_currency(self):
    return self.currency

  def get_request_environ(self):
    return self.environ


def mock_response(method, uri, body, status=200):
  def wrapper(fn):
    @functools.wraps(fn)
    @hp.activate(allow_net_connect=False)
    def inner(*args, **kwargs):
      hp.reset()
      hp.register_uri(method, re.compile('.*' + uri + '$'), json.dumps(body), status=status)
      return fn(*args, **kwargs)
    return inner
  return wrapper


class FakeFinix(object):
  """Catch-all fake Finix server that records every request it receives.

  Use inside an active httpretty context. Responses are taken from `routes`
  (keyed by (method, path)) and fall back to the default status and body.
  """

  def __init__(self, status=200, body=None, routes=None):
    self.status = status
    self.body = {} if body is None else body
    self.routes = routes or {}
    self.requests = []

  def __call__(self, request, uri, response_headers):
    self.requests.append(request)
    path = re.sub(r'^https?://[^/]+', '', uri)
    status, body = self.routes.get((request.method, path), (self.status, self.body))
    if not isinstance(body, str):
      body = json.dumps(body)
    return status, response_headers, body

  def register(self):
    for method in (hp.GET, hp.POST, hp.PUT, hp.DELETE):
      hp.register_uri(method, re.compile('.*'), body=self)
    return self

  @property
  def calls(self):
    return len(self.requests)

  @property
  def last_request(self):
    return self.requests[-1]

  def json(self, index=-1):
    return json.loads(self.requests[index].body.decode('utf-8'))
