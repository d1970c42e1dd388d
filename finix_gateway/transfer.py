import logging

from finix_gateway.model import APIResult
from finix_gateway.payloads import CreateReversalRequest
from finix_gateway.payloads import CreateTransferRequest
from finix_gateway.payloads import UpdateTransferRequest
from finix_gateway.tags import Tags
from finix_gateway.util import gmt_datetime
from finix_gateway.util import unix_time


log = logging.getLogger(__name__)

CREATED = (201,)
OK = (200, 201)


class TransferService(object):
    """Payments (Transfers) and refunds (Reversals) on the Finix API.

    Every call returns an `APIResult`. Without credentials the call is never
    sent and a 401 result comes back instead.

    https://finix.com/docs/api/tag/Transfers/
    """

    def __init__(self, client):
        self.client = client

    def make_payment(self, amount, currency, payment_instrument_token,
                     fraud_session_id='', order_id='', tag_filter=None):
        """Charge `amount` minor units of `currency` to a payment instrument.

        The transfer settles into the alternate merchant when `currency` is
        the alternate currency (CAD by default) and into the default merchant
        otherwise.
        """
        settings = self.client.settings
        tags = Tags()

        if order_id:
            order = self.client.storefront.get_order(order_id)
            if order is not None and order.coupon_codes:
                # Commas are not allowed in tag values.
                tags.add('order_coupons', ' '.join(order.coupon_codes))

        tags.add_bulk({
            'order_id': order_id or '',
            'order_date': gmt_datetime(),
            'source': settings.custom_source_tag,
        })
        tags = self.client.filter_tags(
            tags, {'operation': 'make_payment', 'order_id': order_id}, tag_filter)

        request = CreateTransferRequest(
            amount=amount,
            currency=currency,
            source=payment_instrument_token,
            merchant=settings.merchant_id_for_currency(currency),
            fraud_session_id=fraud_session_id or None,
            tags=tags.prepare())
        return self.client._request(
            'post', self.client.endpoint.transfers(), data=request.to_dict(),
            success=CREATED, hal=True)

    def get_transfer(self, transfer_id):
        """https://finix.com/docs/api/tag/Transfers/#tag/Transfers/operation/getTransfer"""
        return self.client._request(
            'get', self.client.endpoint.transfer(transfer_id), success=OK)

    def update_transfer_with_tags(self, transfer_id, tags, tag_filter=None):
        """Add tags to a transfer.

        Finix merges the tags sent here into the ones the transfer already has;
        sending an existing key overrides its value. An empty set is rejected
        locally with a 400 result.
        """
        if not tags:
            return APIResult.bad_request()

        tag_set = tags if isinstance(tags, Tags) else Tags(tags)
        tag_set = self.client.filter_tags(
            tag_set,
            {'operation': 'update_transfer_with_tags', 'transfer_id': transfer_id},
            tag_filter)

        request = UpdateTransferRequest(tags=tag_set.prepare())
        return self.client._request(
            'put', self.client.endpoint.transfer(transfer_id), data=request.to_dict(),
            success=OK)

    def refund_payment(self, transfer_id, amount, order_id, refund_reason,
                       idempotency_id=None, tag_filter=None):
        """Reverse `amount` minor units of a transfer.

        Pass a stable `idempotency_id` to make retries of the same refund safe.
        Without one the key is derived from the order id and the current time,
        which differs on every call.
        """
        if idempotency_id is None:
            idempotency_id = '%s_%s' % (order_id, unix_time())

        tags = Tags({
            'order_id': order_id,
            'refund_date': gmt_datetime(),
            'source': self.client.settings.custom_source_tag,
            'refund_reason': refund_reason,
        })
        tags = self.client.filter_tags(
            tags,
            {'operation': 'refund_payment', 'order_id': order_id, 'transfer_id': transfer_id},
            tag_filter)

        request = CreateReversalRequest(
            amount=amount, idempotency_id=idempotency_id, tags=tags.prepare())
        log.info('Refunding %s of transfer %s for order %s.', amount, transfer_id, order_id)
        return self.client._request(
            'post', self.client.endpoint.transfer_reversals(transfer_id),
            data=request.to_dict(), success=OK, hal=True)

    @staticmethod
    def get_payment_state(result):
        """Upper-cased state of a transfer result, or UNKNOWN."""
        if not isinstance(result, dict):
            return 'UNKNOWN'
        response = result.get('response')
        if isinstance(response, dict) and response.get('state'):
            return str(response['state']).upper()
        if result.get('state'):
            return str(result['state']).upper()
        return 'UNKNOWN'
