import json

from finix_gateway.error import BAD_REQUEST
from finix_gateway.error import UNAUTHORIZED
from finix_gateway.error import build_api_error
from finix_gateway.error import embedded_errors


def new_finix_object(client, obj, cls=None, **kwargs):
  if isinstance(obj, dict):
    if not cls:
      cls = _model_for_id(obj.get('id', None))
    cls = cls or FinixObject
    result = cls(client, **kwargs)
    for k, v in obj.items():
      result[k] = new_finix_object(client, v)
    return result
  if isinstance(obj, list):
    return [new_finix_object(client, v, cls) for v in obj]
  return obj


def _model_for_id(resource_id):
  if not isinstance(resource_id, str):
    return None
  return _id_prefix_to_model.get(resource_id[:2], None)


class FinixObject(dict):
  """Generic class used to represent a JSON response from the Finix API.

  Decoded HAL documents are wrapped so that they can be read with dot-notation
  (`result.response.id`) as well as item access, while staying plain dicts for
  JSON serialization.
  """
  __api_client = None
  __http_response = None

  def __init__(self, api_client=None, http_response=None):
    self.__api_client = api_client
    self.__http_response = http_response

  @property
  def api_client(self):
    return self.__api_client

  @property
  def http_response(self):
    return self.__http_response

  # The following three method definitions allow dot-notation access to member
  # objects for convenience.
  def __getattr__(self, *args, **kwargs):
    try:
      return dict.__getitem__(self, *args, **kwargs)
    except KeyError as key_error:
      raise AttributeError(*key_error.args)

  def __delattr__(self, *args, **kwargs):
    try:
      return dict.__delitem__(self, *args, **kwargs)
    except KeyError as key_error:
      raise AttributeError(*key_error.args)

  def __setattr__(self, key, value):
    # All attributes that start with '_' will not be accessible via item-getter
    # syntax, which means that they won't be included in conversion to a
    # vanilla dict, which means that FinixObjects can be treated as equivalent
    # to dicts.
    if key.startswith('_') or key in self.__dict__:
      return dict.__setattr__(self, key, value)
    return dict.__setitem__(self, key, value)

  def __dir__(self): # pragma: no cover
    return list(self.keys())

  def __str__(self):
    try:
      return json.dumps(self, sort_keys=True, indent=2)
    except TypeError:
      return '(invalid JSON)'

  def __repr__(self):
    return '<{} @ {}> {}'.format(type(self).__name__, hex(id(self)), str(self)) # pragma: no cover


class APIResult(FinixObject):
  """Normalized outcome of a single Finix API call.

  Always carries `status` and `response` (the decoded body, or None), plus
  `error` when the call failed and a message was available. Nothing in this
  library raises for a failed call; use `raise_for_error()` to opt into
  exceptions.
  """

  def __init__(self, status, response=None, error=None, kind=None, errors=None,
               http_response=None):
    super(APIResult, self).__init__(None, http_response=http_response)
    self.status = status
    self.response = response
    if error:
      self.error = error
    self._kind = kind
    self._errors = errors if errors is not None else embedded_errors(response)

  @classmethod
  def unauthorized(cls, kind=UNAUTHORIZED):
    return cls(401, None, 'Unauthorized', kind=kind)

  @classmethod
  def bad_request(cls, error='Bad Request'):
    return cls(400, None, error, kind=BAD_REQUEST)

  @property
  def kind(self):
    return self._kind

  @property
  def errors(self):
    """Error objects the processor embedded in the response body."""
    return self._errors

  @property
  def ok(self):
    return self._kind is None

  def raise_for_error(self):
    if not self.ok:
      raise build_api_error(self)
    return self


class Identity(FinixObject): pass


class PaymentInstrument(FinixObject): pass


class Merchant(FinixObject):
  def register_apple_pay_domain(self, environ=None):
    """Enable Apple Pay for the serving domain on this merchant's identity."""
    return self.api_client.apple_pay.register_domain(self.identity, environ=environ)


class Transfer(FinixObject):
  @property
  def payment_state(self):
    """SUCCEEDED, PENDING, FAILED, CANCELED, or UNKNOWN when absent."""
    state = self.get('state', None)
    if not isinstance(state, str) or not state:
      return 'UNKNOWN'
    return state.upper()

  def refresh(self):
    result = self.api_client.get_transfer(self.id)
    if result.ok and isinstance(result.response, dict):
      self.update(result.response)
    return result

  def add_tags(self, tags, **params):
    result = self.api_client.update_transfer_with_tags(self.id, tags, **params)
    if result.ok and isinstance(result.response, dict):
      self.update(result.response)
    return result

  def refund(self, amount, order_id, reason, **params):
    return self.api_client.refund_payment(self.id, amount, order_id, reason, **params)


_id_prefix_to_model = {
  'ID': Identity,
  'PI': PaymentInstrument,
  'TR': Transfer,
  'MU': Merchant,
}
