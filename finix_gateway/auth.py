import base64

from requests.auth import AuthBase
from requests.utils import to_native_string


def resolve_token(settings):
  """Return the Basic-auth token for the active mode, or '' if incomplete.

  Callers treat an empty token as "no credentials" and never reach the
  network with it.
  """
  username, password = settings.username, settings.password
  if not username or not password:
    return ''
  credentials = '%s:%s' % (username, password)
  return base64.b64encode(credentials.encode('utf-8')).decode('ascii')


class BasicTokenAuth(AuthBase):
  def __init__(self, token_getter, api_version):
    self.token_getter = token_getter
    self.api_version = api_version

  def __call__(self, request):
    token = self.token_getter()
    request.headers.update({
      to_native_string('Finix-Version'): self.api_version,
      to_native_string('Authorization'):
        to_native_string('Basic {}'.format(token)),
      })
    return request
