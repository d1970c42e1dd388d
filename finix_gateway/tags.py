from decimal import Decimal
from itertools import islice

from finix_gateway.util import sanitize_key
from finix_gateway.util import sanitize_text


SCALAR_TYPES = (str, int, float, bool, Decimal)

# Characters the Finix API rejects in tag values.
DISALLOWED_VALUE_CHARS = ('\\', ',', '"', "'")


def _to_text(value):
  if isinstance(value, bool):
    return '1' if value else ''
  if isinstance(value, float) and value.is_integer():
    return str(int(value))
  return str(value)


class Tags(object):
  """Ordered key/value metadata attached to every Finix resource.

  Keys and values are sanitized on the way in so that whatever the storefront
  hands over is accepted by the API: keys are slugified and capped at 40
  characters, values are stripped of the characters Finix refuses and capped
  at 500 characters. Anything that is not a scalar is dropped (keys) or
  emptied (values) rather than raising.

  https://finix.com/docs/api/overview/#section/Tags
  """

  MAX_TAGS = 50
  LENGTH_KEY = 40
  LENGTH_VALUE = 500

  def __init__(self, tags=None):
    self._tags = {}
    if tags:
      self.add_bulk(tags)

  def add(self, key, value):
    key = self._clean_key(key)
    if not key:
      return
    self._tags[key] = self._clean_value(value)

  def get(self, key):
    key = self._clean_key(key)
    if not key:
      return None
    return self._tags.get(key)

  def delete(self, key):
    key = self._clean_key(key)
    if not key:
      return
    self._tags.pop(key, None)

  def has(self, key):
    key = self._clean_key(key)
    return bool(key) and key in self._tags

  def clear(self):
    self._tags.clear()

  def add_bulk(self, tags):
    for key, value in tags.items():
      self.add(key, value)

  def prepare(self):
    """Return the tags as an object ready to be embedded in a request body.

    Finix does not accept more than 50 tags: the first 50 in insertion order
    are kept and everything else is discarded.
    """
    return dict(islice(self._tags.items(), self.MAX_TAGS))

  def _clean_key(self, key):
    if not isinstance(key, SCALAR_TYPES):
      return None
    return sanitize_key(_to_text(key))[:self.LENGTH_KEY]

  def _clean_value(self, value):
    if not isinstance(value, SCALAR_TYPES):
      return ''
    clean = sanitize_text(_to_text(value))
    for char in DISALLOWED_VALUE_CHARS:
      clean = clean.replace(char, '')
    return clean[:self.LENGTH_VALUE]

  def __len__(self):
    return len(self._tags)

  def __iter__(self):
    return iter(self._tags)

  def __contains__(self, key):
    return self.has(key)

  def __repr__(self):
    return 'Tags(%r)' % (self._tags,)
