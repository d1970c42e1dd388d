import logging
import threading


log = logging.getLogger(__name__)


class MerchantInfoCache(object):
  """Memo of the merchant lookup, owned by a client.

  The first result is kept whatever it is, failures included, until
  `invalidate()` is called. Population happens at most once even when several
  threads ask at the same time.
  """

  def __init__(self):
    self._lock = threading.Lock()
    self._value = None
    self._populated = False

  @property
  def populated(self):
    return self._populated

  def get(self, fetch):
    if self._populated:
      return self._value
    with self._lock:
      if not self._populated:
        self._value = fetch()
        self._populated = True
        log.info('Cached merchant info (status %s).', self._value.get('status'))
    return self._value

  def invalidate(self):
    with self._lock:
      self._value = None
      self._populated = False
    log.info('Merchant info cache invalidated.')
