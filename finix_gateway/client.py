import logging

import requests

from finix_gateway import __version__
from finix_gateway.apple_pay import ApplePayService
from finix_gateway.auth import BasicTokenAuth
from finix_gateway.auth import resolve_token
from finix_gateway.endpoint import Endpoint
from finix_gateway.error import MALFORMED_RESPONSE
from finix_gateway.error import REMOTE_ERROR
from finix_gateway.error import TRANSPORT_FAILURE
from finix_gateway.identity import BuyerIdentity
from finix_gateway.instrument import InstrumentToken
from finix_gateway.merchant import MerchantInfoCache
from finix_gateway.model import APIResult
from finix_gateway.model import new_finix_object
from finix_gateway.settings import Settings
from finix_gateway.storefront import Storefront
from finix_gateway.transfer import TransferService
from finix_gateway.util import check_uri_security
from finix_gateway.util import encode_params


log = logging.getLogger(__name__)


def keep_tags(tags, context):
    return tags


class Client(object):
    """API Client for the Finix payments API.

    Entry point for making requests to the Finix API on behalf of a storefront.
    Holds the settings, the endpoints of the active environment and a requests
    session; the Transfers and Apple Pay resource families hang off it as
    `transfers` and `apple_pay`, and buyers and payment instruments are built
    with `new_buyer()` and `create_instrument_token()`.

    Nothing here raises for a failed call. Every operation returns an
    `APIResult` with the HTTP status, the decoded body (or None) and, on
    failure, an error message. Calls made without credentials for the active
    mode never leave the process and come back as 401 "Unauthorized".

    `tag_filter` is called as `tag_filter(tags, context)` right before a
    request goes out and must return the `Tags` to send. Every operation also
    accepts its own `tag_filter`.

    Full API docs are available here: https://finix.com/docs/api/
    """

    SANDBOX_URL = 'https://finix.sandbox-payments-api.com/'
    LIVE_URL = 'https://finix.live-payments-api.com/'

    # Payment method configurations are served from their own root.
    SANDBOX_CONFIG_URL = 'https://finix.sandbox-payments-api.com/'
    LIVE_CONFIG_URL = 'https://finix.live-payments-api.com/'

    API_VERSION = '2022-02-01'

    def __init__(self, settings, storefront=None, tag_filter=None,
                 base_api_uri=None, config_api_uri=None, api_version=None):
        if settings is None:
            raise ValueError('Missing `settings`.')
        if isinstance(settings, dict):
            settings = Settings.from_options(settings)

        self.settings = settings
        self.storefront = storefront or Storefront()
        self.tag_filter = tag_filter or keep_tags

        if settings.is_sandbox_mode:
            default_base, default_config = self.SANDBOX_URL, self.SANDBOX_CONFIG_URL
        else:
            default_base, default_config = self.LIVE_URL, self.LIVE_CONFIG_URL

        # Allow passing in a different API base.
        self.BASE_API_URI = check_uri_security(base_api_uri or default_base)
        self.CONFIG_API_URI = check_uri_security(
            config_api_uri or base_api_uri or default_config)

        self.API_VERSION = api_version or self.API_VERSION

        self.endpoint = Endpoint(self.BASE_API_URI, self.CONFIG_API_URI)

        # Set up a requests session for interacting with the API.
        self.session = self._build_session(BasicTokenAuth, self.get_token, self.API_VERSION)

        self.merchant_info_cache = MerchantInfoCache()
        self.transfers = TransferService(self)
        self.apple_pay = ApplePayService(self)

    @property
    def is_sandbox_mode(self):
        return self.settings.is_sandbox_mode

    def get_token(self):
        """Basic-auth token for the active mode, '' when not configured."""
        return resolve_token(self.settings)

    def _build_session(self, auth_class, *args, **kwargs):
        """Internal helper for creating a requests `session` with the correct
        authentication handling.
        """
        session = requests.session()
        session.auth = auth_class(*args, **kwargs)
        session.headers.update({'Finix-Version': self.API_VERSION,
                                'Content-Type': 'application/json',
                                'User-Agent': 'finix-gateway/python/%s' % __version__})
        return session

    def _request(self, method, url, data=None, success=(200, 201), hal=False):
        """Internal helper for sending one request to the Finix API.

        Returns an `APIResult`; statuses outside `success` are failures. Not
        intended for direct use by API consumers.
        """
        if not self.get_token():
            log.debug('No Finix credentials, %s %s not sent.', method.upper(), url)
            return APIResult.unauthorized()

        kwargs = {'timeout': self.settings.timeout}
        if hal:
            kwargs['headers'] = {'Accept': 'application/hal+json'}
        if data is not None:
            kwargs['data'] = encode_params(data)

        log.debug('Finix API request: %s %s', method.upper(), url)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            log.error('Finix API request %s %s failed: %s', method.upper(), url, e)
            return APIResult(0, None, str(e), kind=TRANSPORT_FAILURE)
        return self._handle_response(response, success)

    def _handle_response(self, response, success):
        """Internal helper for normalizing API responses from the Finix server.

        A body that is not JSON becomes a None response.
        """
        status = response.status_code
        content, malformed = self._decode(response)
        kind = None
        error = None
        if status not in success:
            kind = REMOTE_ERROR
            error = response.reason or None
            log.warning('Finix API returned %s %s for %s', status, response.reason, response.url)
        elif malformed:
            kind = MALFORMED_RESPONSE
            log.warning('Finix API returned a body that is not JSON for %s', response.url)
        else:
            log.debug('Finix API response: %s %s', status, response.url)
        return APIResult(
            status, new_finix_object(self, content), error, kind=kind,
            http_response=response)

    def _decode(self, response):
        if not response.content:
            return None, False
        try:
            return response.json(), False
        except ValueError:
            return None, True

    def filter_tags(self, tags, context, tag_filter=None):
        """Run the tag filter for one outgoing request."""
        return (tag_filter or self.tag_filter)(tags, context)

    # Identities and Payment Instruments
    # -----------------------------------------------------------
    def new_buyer(self):
        """Start building a buyer Identity."""
        return BuyerIdentity(self)

    def create_instrument_token(self):
        """Start building a Payment Instrument."""
        return InstrumentToken(self)

    # Transfers API
    # -----------------------------------------------------------
    def make_payment(self, *args, **kwargs):
        return self.transfers.make_payment(*args, **kwargs)

    def get_transfer(self, transfer_id):
        return self.transfers.get_transfer(transfer_id)

    def update_transfer_with_tags(self, transfer_id, tags, **kwargs):
        return self.transfers.update_transfer_with_tags(transfer_id, tags, **kwargs)

    def refund_payment(self, *args, **kwargs):
        return self.transfers.refund_payment(*args, **kwargs)

    def get_payment_state(self, result):
        return self.transfers.get_payment_state(result)

    # Merchants API
    # -----------------------------------------------------------
    def get_merchant_info(self):
        """Merchant for the store's active currency, fetched once per client.

        The first outcome is cached, failures included; see
        `merchant_info_cache.invalidate()`.
        """
        return self.merchant_info_cache.get(self._fetch_merchant_info)

    def _fetch_merchant_info(self):
        currency = self.storefront.get_currency()
        merchant_id = self.settings.merchant_id_for_currency(currency)
        return self._request('get', self.endpoint.merchant(merchant_id), success=(200, 201))
