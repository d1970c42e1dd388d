from finix_gateway.error import VALIDATION_ERROR
from finix_gateway.model import APIResult
from finix_gateway.payloads import APPLE_PAY
from finix_gateway.payloads import CreateInstrumentRequest
from finix_gateway.payloads import GOOGLE_PAY
from finix_gateway.payloads import TOKEN
from finix_gateway.tags import Tags
from finix_gateway.util import gmt_datetime
from finix_gateway.util import sanitize_key
from finix_gateway.util import sanitize_text


CARD_GATEWAY = 'finix_gateway'
BANK_GATEWAY = 'finix_bank_gateway'
APPLE_PAY_GATEWAY = 'finix_apple_pay_gateway'
GOOGLE_PAY_GATEWAY = 'finix_google_pay_gateway'

_gateway_to_type = {
    CARD_GATEWAY: TOKEN,
    BANK_GATEWAY: TOKEN,
    APPLE_PAY_GATEWAY: APPLE_PAY,
    GOOGLE_PAY_GATEWAY: GOOGLE_PAY,
    'token': TOKEN,
    'apple_pay': APPLE_PAY,
    'google_pay': GOOGLE_PAY,
}


def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class InstrumentToken(object):
    """Create a Payment Instrument from a card, bank account or wallet token.

    https://finix.com/docs/api/tag/Payment-Instruments/
    """

    def __init__(self, client):
        self.client = client
        self.type = None
        self.token = None
        self.buyer_identity = None
        self.buyer_name = ''
        self.merchant_identity = None
        self.order_id = 0

    def set_gateway(self, gateway):
        """Pick the instrument type from the checkout gateway slug.

        Unknown slugs leave the type as it was.
        """
        self.type = _gateway_to_type.get(sanitize_key(str(gateway)), self.type)
        return self

    def set_token(self, token):
        self.token = sanitize_text(token)
        return self

    def set_buyer_identity(self, buyer_identity):
        self.buyer_identity = sanitize_text(buyer_identity)
        return self

    def set_buyer_name(self, buyer_name):
        self.buyer_name = sanitize_text(buyer_name)
        return self

    def set_merchant_identity(self, merchant_identity):
        self.merchant_identity = sanitize_text(merchant_identity)
        return self

    def set_order(self, order_id):
        self.order_id = _to_int(order_id)
        return self

    def create(self, tag_filter=None):
        # Kept as a 401 for existing callers; `kind` tells it apart from a
        # credentials problem.
        if not self.type:
            return APIResult.unauthorized(kind=VALIDATION_ERROR)
        if not self.client.get_token():
            return APIResult.unauthorized()

        tags = Tags({
            'order_id': self.order_id,
            'order_date': gmt_datetime(),
            'source': self.client.settings.custom_source_tag,
        })
        tags = self.client.filter_tags(
            tags, {'operation': 'create_instrument_token', 'order_id': self.order_id},
            tag_filter)

        fields = {
            'type': self.type,
            'identity': self.buyer_identity,
            'name': self.buyer_name,
            'tags': tags.prepare(),
        }
        if self.type == TOKEN:
            fields['token'] = self.token
        else:
            fields['third_party_token'] = self.token
            fields['merchant_identity'] = self.merchant_identity

        request = CreateInstrumentRequest(**fields)
        return self.client._request(
            'post', self.client.endpoint.payment_instruments(), data=request.to_dict(),
            success=(201,))
