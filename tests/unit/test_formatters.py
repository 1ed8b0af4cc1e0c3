"""
Unit tests for bg-BG display formatting.
"""

from datetime import date, datetime
from decimal import Decimal
from parketsense.utils.formatters import num_bg, money_bg, date_bg, datetime_bg


class TestNumbers:

    def test_decimal_comma(self):
        assert num_bg(945) == '945,00'
        assert num_bg(Decimal('0.5')) == '0,50'

    def test_four_digits_are_not_grouped(self):
        assert num_bg(1234.5) == '1234,50'

    def test_five_digits_and_up_are_grouped(self):
        assert num_bg(12345.678) == '12 345,68'
        assert num_bg(Decimal('1234567')) == '1 234 567,00'

    def test_negative(self):
        assert num_bg(Decimal('-12345.5')) == '-12 345,50'

    def test_half_up(self):
        assert num_bg(Decimal('2.005')) == '2,01'

    def test_custom_decimals(self):
        assert num_bg(21, decimals=3) == '21,000'
        assert num_bg(Decimal('99.6'), decimals=0) == '100'

    def test_invalid_input(self):
        assert num_bg(None) == '-'
        assert num_bg('') == '-'
        assert num_bg('abc') == '-'


class TestMoney:

    def test_bgn_default(self):
        assert money_bg(945) == '945,00 лв.'

    def test_eur(self):
        assert money_bg(Decimal('12345.5'), 'EUR') == '12 345,50 €'
        assert money_bg(10, 'eur') == '10,00 €'

    def test_missing(self):
        assert money_bg(None) == '-'


class TestDates:

    def test_date(self):
        assert date_bg(date(2025, 6, 20)) == '20.06.2025'

    def test_datetime_as_date(self):
        assert date_bg(datetime(2025, 1, 2, 15, 30)) == '02.01.2025'

    def test_datetime(self):
        assert datetime_bg(datetime(2025, 1, 2, 15, 30)) == '02.01.2025 15:30'

    def test_missing(self):
        assert date_bg(None) == '-'
        assert date_bg('2025-06-20') == '-'
        assert datetime_bg(None) == '-'
