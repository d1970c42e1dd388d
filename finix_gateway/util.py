import json
import re
import time
import warnings
from decimal import Decimal
from decimal import InvalidOperation
from decimal import ROUND_HALF_UP
from urllib.parse import urlparse


_TAG_RE = re.compile(r'<[^>]*>')
_OCTET_RE = re.compile(r'%[a-fA-F0-9]{2}')
_WHITESPACE_RE = re.compile(r'\s+')
_KEY_RE = re.compile(r'[^a-z0-9_\-]')

TWO_PLACES = Decimal('0.01')


def clean_params(params, drop_nones=True, recursive=True):
  """Clean up a dict of API parameters to be sent to the Finix API.

  By default, will remove all keys whose value is None, so that they will not
  be sent to the API endpoint at all. Empty dicts are kept as they are: the API
  expects `tags` to be an object even when no tag is set.
  """
  cleaned = {}
  for key, value in params.items():
    if drop_nones and value is None:
      continue
    if recursive and isinstance(value, dict):
      value = clean_params(value, drop_nones, recursive)
    elif recursive and isinstance(value, list):
      value = [
          clean_params(item, drop_nones, recursive) if isinstance(item, dict) else item
          for item in value]
    cleaned[key] = value
  return cleaned


def encode_params(params, **kwargs):
  """Clean and JSON-encode a dict of parameters."""
  cleaned = clean_params(params, **kwargs)
  return json.dumps(cleaned)


def check_uri_security(uri):
  """Warns if the URL is insecure."""
  if urlparse(uri).scheme != 'https':
    warning_message = (
        'WARNING: this client is sending a request to an insecure'
        ' API endpoint. Any API request you make may expose your API'
        ' credentials to third parties. Consider using the default endpoint:\n\n'
        '  %s\n') % uri
    warnings.warn(warning_message, UserWarning)
  return uri


def sanitize_key(key):
  """Lower-case a key and keep only alphanumerics, dashes and underscores."""
  return _KEY_RE.sub('', key.lower())


def sanitize_text(value):
  """Strip markup, percent-encoded octets and extra whitespace from text."""
  text = _TAG_RE.sub('', value)
  text = _OCTET_RE.sub('', text)
  text = _WHITESPACE_RE.sub(' ', text)
  return text.strip()


def amount_to_number(amount):
  """Format a display amount such as "$1,234.5" as a plain "1234.50".

  Wallet payment sheets expect the amount in this shape. Anything that does
  not parse as a number is treated as zero.
  """
  cleaned = str(amount).replace('$', '').replace(',', '').strip()
  try:
    number = Decimal(cleaned)
  except InvalidOperation:
    number = Decimal(0)
  if not number.is_finite():
    number = Decimal(0)
  return str(number.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def amount_to_minor_units(amount):
  """Convert a display amount to integer cents, e.g. "$12.34" -> 1234."""
  return int(Decimal(amount_to_number(amount)) * 100)


def gmt_datetime():
  return time.strftime('%Y-%m-%d %H:%M:%S', time.gmtime())


def unix_time():
  return int(time.time())
