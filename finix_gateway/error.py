UNAUTHORIZED = 'unauthorized'
BAD_REQUEST = 'bad_request'
VALIDATION_ERROR = 'validation_error'
REMOTE_ERROR = 'remote_error'
MALFORMED_RESPONSE = 'malformed_response'
TRANSPORT_FAILURE = 'transport_failure'


class FinixError(Exception):
  """Base error class for all exceptions raised in this library.

  Will never be raised naked; more specific subclasses of this exception will
  be raised when appropriate."""


class APIError(FinixError):
  """Raised for an unsuccessful `APIResult` when the caller asks for it."""
  def __init__(self, result, message, errors=None):
    self.status_code = result.get('status')
    self.result = result
    self.kind = getattr(result, 'kind', None)
    self.message = message or ''
    self.errors = errors or []
    super(APIError, self).__init__(self.message)
  def __str__(self): # pragma: no cover
    return 'APIError(status=%s): %s' % (self.status_code, self.message)


class AuthenticationError(APIError): pass
class InvalidRequestError(APIError): pass
class PaymentRequiredError(APIError): pass
class ForbiddenError(APIError): pass
class NotFoundError(APIError): pass
class ValidationError(APIError): pass
class RateLimitExceededError(APIError): pass
class InternalServerError(APIError): pass
class ServiceUnavailableError(APIError): pass
class MalformedResponseError(APIError): pass
class TransportError(APIError): pass


def embedded_errors(response):
  """Pull the `_embedded.errors` list out of a decoded Finix response."""
  if not isinstance(response, dict):
    return []
  embedded = response.get('_embedded')
  if not isinstance(embedded, dict):
    return []
  errors = embedded.get('errors')
  return errors if isinstance(errors, list) else []


def build_api_error(result):
  """Helper method for turning a failed `APIResult` into an exception.

  The processor's own message wins over the HTTP reason phrase.
  """
  errors = getattr(result, 'errors', None) or embedded_errors(result.get('response'))
  error = errors[0] if errors and isinstance(errors[0], dict) else {}
  message = error.get('message') or result.get('error')
  error_class = (
      _kind_to_class.get(getattr(result, 'kind', None), None) or
      _status_code_to_class.get(result.get('status'), APIError))
  return error_class(result, message, errors)


_kind_to_class = {
  UNAUTHORIZED: AuthenticationError,
  BAD_REQUEST: InvalidRequestError,
  VALIDATION_ERROR: InvalidRequestError,
  MALFORMED_RESPONSE: MalformedResponseError,
  TRANSPORT_FAILURE: TransportError,
}

_status_code_to_class = {
    400: InvalidRequestError,
    401: AuthenticationError,
    402: PaymentRequiredError,
    403: ForbiddenError,
    404: NotFoundError,
    422: ValidationError,
    429: RateLimitExceededError,
    500: InternalServerError,
    503: ServiceUnavailableError,
  }
