import unittest
from unittest import mock

import httpretty as hp

from finix_gateway.error import BAD_REQUEST
from finix_gateway.model import APIResult
from finix_gateway.model import Transfer
from finix_gateway.tags import Tags
from finix_gateway.transfer import TransferService
from tests.helpers import FakeFinix
from tests.helpers import FakeStorefront
from tests.helpers import make_client
from tests.helpers import make_order
from tests.helpers import merchant_id
from tests.helpers import merchant_id_cad


fixed_date = '2024-05-02 12:30:00'


@mock.patch('finix_gateway.transfer.gmt_datetime', lambda: fixed_date)
class TestMakePayment(unittest.TestCase):
  @hp.activate(allow_net_connect=False)
  def test_payment_body(self):
    fake = FakeFinix(status=201, body={'id': 'TRnew', 'state': 'PENDING'}).register()
    result = make_client().make_payment(1000, 'USD', 'PIsource', 'FSsession', 1042)

    self.assertTrue(result.ok)
    self.assertIsInstance(result.response, Transfer)
    self.assertEqual(result.response.payment_state, 'PENDING')
    self.assertEqual(fake.last_request.path, '/transfers')
    self.assertEqual(fake.json(), {
        'amount': 1000,
        'currency': 'USD',
        'source': 'PIsource',
        'merchant': merchant_id,
        'fraud_session_id': 'FSsession',
        'tags': {
            'order_id': '1042',
            'order_date': fixed_date,
            'source': 'teststore',
        },
    })

  @hp.activate(allow_net_connect=False)
  def test_alternate_currency_routes_to_alternate_merchant(self):
    fake = FakeFinix(status=201, body={'id': 'TRnew'}).register()
    client = make_client()
    client.make_payment(1000, 'CAD', 'PIsource')
    self.assertEqual(fake.json()['merchant'], merchant_id_cad)
    client.make_payment(1000, 'EUR', 'PIsource')
    self.assertEqual(fake.json()['merchant'], merchant_id)

  @hp.activate(allow_net_connect=False)
  def test_empty_fraud_session_is_omitted(self):
    fake = FakeFinix(status=201, body={'id': 'TRnew'}).register()
    make_client().make_payment(1000, 'USD', 'PIsource', '', 1042)
    self.assertNotIn('fraud_session_id', fake.json())
    self.assertEqual(fake.json()['tags']['order_id'], '1042')

  @hp.activate(allow_net_connect=False)
  def test_order_coupons_tag(self):
    fake = FakeFinix(status=201, body={'id': 'TRnew'}).register()
    order = make_order(coupon_codes=['SPRING10', 'FREESHIP'])
    client = make_client(storefront=FakeStorefront(orders=[order]))
    client.make_payment(1000, 'USD', 'PIsource', order_id=1042)

    tags = fake.json()['tags']
    self.assertEqual(tags['order_coupons'], 'SPRING10 FREESHIP')
    self.assertEqual(list(tags), ['order_coupons', 'order_id', 'order_date', 'source'])

  @hp.activate(allow_net_connect=False)
  def test_order_without_coupons_has_no_coupon_tag(self):
    fake = FakeFinix(status=201, body={'id': 'TRnew'}).register()
    client = make_client(storefront=FakeStorefront(orders=[make_order()]))
    client.make_payment(1000, 'USD', 'PIsource', order_id=1042)
    self.assertNotIn('order_coupons', fake.json()['tags'])

  @hp.activate(allow_net_connect=False)
  def test_only_201_is_success(self):
    FakeFinix(status=200, body={'id': 'TRnew'}).register()
    result = make_client().make_payment(1000, 'USD', 'PIsource')
    self.assertFalse(result.ok)

  @hp.activate(allow_net_connect=False)
  def test_declined_payment_carries_processor_message(self):
    FakeFinix(status=402, body={
        '_embedded': {'errors': [{'code': 'DECLINED', 'message': 'Card declined'}]},
    }).register()
    result = make_client().make_payment(1000, 'USD', 'PIsource')
    self.assertEqual(result.status, 402)
    self.assertEqual(result.errors[0].message, 'Card declined')

  def test_amount_must_be_minor_units(self):
    client = make_client()
    for amount in ('10.00', 10.0, True, None):
      with self.assertRaises(ValueError):
        client.make_payment(amount, 'USD', 'PIsource')


class TestGetTransfer(unittest.TestCase):
  @hp.activate(allow_net_connect=False)
  def test_get(self):
    fake = FakeFinix(body={'id': 'TRabc', 'state': 'SUCCEEDED'}).register()
    client = make_client()
    result = client.get_transfer('TRabc')
    self.assertEqual(fake.last_request.method, 'GET')
    self.assertEqual(fake.last_request.path, '/transfers/TRabc')
    self.assertEqual(client.get_payment_state(result), 'SUCCEEDED')

  @hp.activate(allow_net_connect=False)
  def test_transfer_ids_are_escaped(self):
    fake = FakeFinix(body={}).register()
    make_client().get_transfer('TR/../identities')
    self.assertEqual(fake.last_request.path, '/transfers/TR%2F..%2Fidentities')


class TestUpdateTransferWithTags(unittest.TestCase):
  @hp.activate(allow_net_connect=False)
  def test_put_tags(self):
    fake = FakeFinix(body={'id': 'TRabc', 'tags': {'shipped': '1'}}).register()
    result = make_client().update_transfer_with_tags('TRabc', {'shipped': True, 'Note Key': 'a,b'})
    self.assertTrue(result.ok)
    self.assertEqual(fake.last_request.method, 'PUT')
    self.assertEqual(fake.last_request.path, '/transfers/TRabc')
    self.assertEqual(fake.json(), {'tags': {'shipped': '1', 'notekey': 'ab'}})

  @hp.activate(allow_net_connect=False)
  def test_accepts_tags_instance(self):
    fake = FakeFinix(body={'id': 'TRabc'}).register()
    make_client().update_transfer_with_tags('TRabc', Tags({'carrier': 'ups'}))
    self.assertEqual(fake.json(), {'tags': {'carrier': 'ups'}})

  @hp.activate(allow_net_connect=False)
  def test_empty_tags_are_rejected_locally(self):
    fake = FakeFinix(body={}).register()
    client = make_client()
    for tags in ({}, Tags(), None):
      result = client.update_transfer_with_tags('TRabc', tags)
      self.assertEqual(result, {'status': 400, 'response': None, 'error': 'Bad Request'})
      self.assertEqual(result.kind, BAD_REQUEST)
    self.assertEqual(fake.calls, 0)


@mock.patch('finix_gateway.transfer.gmt_datetime', lambda: fixed_date)
@mock.patch('finix_gateway.transfer.unix_time', lambda: 1714653000)
class TestRefundPayment(unittest.TestCase):
  @hp.activate(allow_net_connect=False)
  def test_refund_body(self):
    fake = FakeFinix(status=201, body={'id': 'TRreversal', 'state': 'PENDING'}).register()
    result = make_client().refund_payment('TRabc', 250, 1042, 'Damaged item')

    self.assertTrue(result.ok)
    self.assertEqual(fake.last_request.path, '/transfers/TRabc/reversals')
    self.assertEqual(fake.last_request.headers.get('Accept'), 'application/hal+json')
    self.assertEqual(fake.json(), {
        'amount': 250,
        'idempotency_id': '1042_1714653000',
        'tags': {
            'order_id': '1042',
            'refund_date': fixed_date,
            'source': 'teststore',
            'refund_reason': 'Damaged item',
        },
    })

  @hp.activate(allow_net_connect=False)
  def test_caller_idempotency_key(self):
    fake = FakeFinix(status=201, body={'id': 'TRreversal'}).register()
    client = make_client()
    client.refund_payment('TRabc', 250, 1042, 'Damaged', idempotency_id='refund-1042-1')
    client.refund_payment('TRabc', 250, 1042, 'Damaged', idempotency_id='refund-1042-1')
    self.assertEqual(fake.json(0)['idempotency_id'], 'refund-1042-1')
    self.assertEqual(fake.json(1)['idempotency_id'], 'refund-1042-1')

  @hp.activate(allow_net_connect=False)
  def test_refund_reason_is_cleaned(self):
    fake = FakeFinix(status=201, body={'id': 'TRreversal'}).register()
    make_client().refund_payment('TRabc', 250, 1042, 'Customer said "no", twice')
    self.assertEqual(fake.json()['tags']['refund_reason'], 'Customer said no twice')

  def test_refund_logs(self):
    client = make_client(test_username='')
    with self.assertLogs('finix_gateway.transfer', level='INFO') as logs:
      client.refund_payment('TRabc', 250, 1042, 'Damaged')
    self.assertIn('TRabc', logs.output[0])


class TestGetPaymentState(unittest.TestCase):
  def test_states(self):
    state = TransferService.get_payment_state
    self.assertEqual(state(APIResult(201, {'state': 'succeeded'})), 'SUCCEEDED')
    self.assertEqual(state({'state': 'failed'}), 'FAILED')
    self.assertEqual(state(APIResult(201, {'id': 'TR1'})), 'UNKNOWN')
    self.assertEqual(state(APIResult.unauthorized()), 'UNKNOWN')
    self.assertEqual(state(None), 'UNKNOWN')
