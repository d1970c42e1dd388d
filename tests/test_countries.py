import unittest

from finix_gateway.countries import ISO2_TO_ISO3
from finix_gateway.countries import to_iso3


class TestCountries(unittest.TestCase):
  def test_known_codes(self):
    self.assertEqual(to_iso3('US'), 'USA')
    self.assertEqual(to_iso3('CA'), 'CAN')
    self.assertEqual(to_iso3('GB'), 'GBR')
    self.assertEqual(to_iso3('de'), 'DEU')

  def test_three_letter_codes_are_returned_unchanged(self):
    self.assertEqual(to_iso3('USA'), 'USA')
    self.assertEqual(to_iso3('MEX'), 'MEX')

  def test_unknown_codes_default_to_usa(self):
    with self.assertLogs('finix_gateway.countries', level='WARNING'):
      self.assertEqual(to_iso3('ZZ'), 'USA')
    with self.assertLogs('finix_gateway.countries', level='WARNING'):
      self.assertEqual(to_iso3(''), 'USA')

  def test_unknown_codes_with_explicit_default(self):
    with self.assertLogs('finix_gateway.countries', level='WARNING'):
      self.assertIsNone(to_iso3('ZZ', default=None))

  def test_table_values_are_three_letters(self):
    for code, iso3 in ISO2_TO_ISO3.items():
      self.assertEqual(len(code), 2)
      self.assertEqual(len(iso3), 3)
