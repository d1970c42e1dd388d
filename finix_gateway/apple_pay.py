import re

from finix_gateway.error import embedded_errors
from finix_gateway.model import APIResult
from finix_gateway.payloads import ApplePaySessionRequest
from finix_gateway.payloads import Domain
from finix_gateway.payloads import DomainRegistrationRequest
from finix_gateway.util import sanitize_text


_SCHEME_RE = re.compile(r'^http(s)?://')
_PATH_RE = re.compile(r'/.*$')
_PORT_RE = re.compile(r':\d+$')


def domain_from_environ(environ):
    """Bare hostname serving the request: SERVER_NAME, else HTTP_HOST."""
    for key in ('SERVER_NAME', 'HTTP_HOST'):
        value = environ.get(key)
        if value:
            domain = sanitize_text(str(value))
            break
    else:
        return ''
    domain = _SCHEME_RE.sub('', domain)
    domain = _PATH_RE.sub('', domain)
    return _PORT_RE.sub('', domain)


class ApplePayService(object):
    """Apple Pay domain registration and merchant sessions."""

    def __init__(self, client):
        self.client = client

    def register_domain(self, merchant_id, environ=None):
        """Enable Apple Pay on the domain serving the current request.

        `merchant_id` is the merchant's Identity id. `environ` defaults to the
        storefront's current request.
        """
        if environ is None:
            environ = self.client.storefront.get_request_environ()
        domain = domain_from_environ(environ)
        if not domain:
            return APIResult.bad_request('Domain not found')

        request = DomainRegistrationRequest(
            merchant_identity=merchant_id, domains=[Domain(name=domain)])
        return self.client._request(
            'post', self.client.endpoint.payment_method_configurations(),
            data=request.to_dict(), success=(200, 201), hal=True)

    def get_session(self, merchant_identity, domain, validation_url, merchant_name):
        """https://finix.com/docs/api/tag/Payment-Instruments/#tag/Payment-Instruments/operation/createApplePaySession"""
        request = ApplePaySessionRequest(
            display_name=merchant_name,
            domain=domain,
            merchant_identity=merchant_identity,
            validation_url=validation_url)
        return self.client._request(
            'post', self.client.endpoint.apple_pay_sessions(),
            data=request.to_dict(), success=(200,))

    @staticmethod
    def is_domain_already_registered(result):
        """True when a failed registration only failed because it exists."""
        for error in embedded_errors(result.get('response')):
            message = error.get('message') if isinstance(error, dict) else None
            if message and 'already enabled' in message:
                return True
        return False
