import logging

from finix_gateway.countries import to_iso3
from finix_gateway.model import APIResult
from finix_gateway.payloads import Address
from finix_gateway.payloads import CreateIdentityRequest
from finix_gateway.payloads import IdentityEntity
from finix_gateway.tags import Tags
from finix_gateway.util import gmt_datetime


log = logging.getLogger(__name__)


class BuyerIdentity(object):
    """Builds and creates the buyer Identity that owns a payment instrument.

    Populate it once, either from an order (`with_order`) or from raw billing
    fields (`with_raw_data`, for wallet checkouts where no order exists yet),
    then call `create()`. The id returned by Finix is kept on `identity_id`.

    https://finix.com/docs/api/tag/Identities/
    """

    def __init__(self, client):
        self.client = client
        self.entity = None
        self.order = None
        self.identity_id = None
        self.tags = Tags()

    def _check_unpopulated(self):
        if self.entity is not None:
            raise ValueError('Buyer identity data has already been set.')

    def with_order(self, order):
        self._check_unpopulated()
        billing = order.billing
        self.order = order
        self.entity = IdentityEntity(
            email=billing.email,
            first_name=billing.first_name,
            last_name=billing.last_name,
            phone=billing.phone,
            personal_address=Address(
                city=billing.city,
                country=to_iso3(billing.country),
                line1=billing.address_1,
                line2=billing.address_2,
                postal_code=billing.postcode,
                region=billing.state))

        self.tags.add_bulk({
            'order_id': order.id,
            'order_date': order.date_created,
            'user_id': order.customer_id,
        })
        return self

    def with_raw_data(self, data):
        """Populate from billing fields keyed email, first_name, last_name,
        phone, city, country, address_1, address_2, postcode and state."""
        self._check_unpopulated()
        email = data.get('email', '')
        self.entity = IdentityEntity(
            email=email,
            first_name=data.get('first_name', ''),
            last_name=data.get('last_name', ''),
            phone=data.get('phone', ''),
            personal_address=Address(
                city=data.get('city', ''),
                country=to_iso3(data.get('country', '')),
                line1=data.get('address_1', ''),
                line2=data.get('address_2', ''),
                postal_code=data.get('postcode', ''),
                region=data.get('state', '')))

        self.tags.add_bulk({
            'order_id': '',
            'order_date': gmt_datetime(),
            'user_id': self._user_id_from_email(email),
        })
        return self

    def create(self, tag_filter=None):
        if self.entity is None:
            raise ValueError(
                'Buyer identity has no data, call with_order() or with_raw_data() first.')
        if self.identity_id is not None:
            raise ValueError('Buyer identity %s was already created.' % self.identity_id)

        if not self.client.get_token():
            return APIResult.unauthorized()

        user_id = self.tags.get('user_id')
        if not user_id or user_id == '0':
            user_id = self.client.storefront.get_current_user_id()
        self.tags.add('user_id', user_id)
        self.tags.add('source', self.client.settings.custom_source_tag)

        self.tags = self.client.filter_tags(
            self.tags, {'operation': 'create_buyer_identity', 'entity': self.entity},
            tag_filter)

        request = CreateIdentityRequest(entity=self.entity, tags=self.tags.prepare())
        result = self.client._request(
            'post', self.client.endpoint.identities(), data=request.to_dict(),
            success=(200, 201), hal=True)

        if result.ok and isinstance(result.response, dict):
            self.identity_id = result.response.get('id')
            log.debug('Created buyer identity %s.', self.identity_id)
        return result

    def _user_id_from_email(self, email):
        if not email:
            return 0
        return self.client.storefront.find_user_id_by_email(email) or 0
