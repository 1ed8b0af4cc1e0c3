"""
Unit tests for catalogue price derivation.
"""

import pytest
from decimal import Decimal
from parketsense.exceptions import BusinessLogicError
from parketsense.services.product_service import (
    EUR_TO_BGN_RATE, calculate_sale_price, resolve_product_prices, eur_to_bgn, bgn_to_eur
)


class TestSalePrice:
    """Tests for the margin-on-sale formula."""

    def test_thirty_percent_markup(self):
        """70 at 30% is 100, not 91."""
        assert calculate_sale_price(Decimal('70'), Decimal('30')) == Decimal('100')

    def test_zero_markup_keeps_cost(self):
        assert calculate_sale_price(Decimal('70'), Decimal('0')) == Decimal('70')

    @pytest.mark.parametrize('markup', [Decimal('100'), Decimal('150')])
    def test_markup_of_100_or_more_is_rejected(self, markup):
        with pytest.raises(BusinessLogicError):
            calculate_sale_price(Decimal('70'), markup)


class TestResolveProductPrices:
    """Tests for currency back-fill and sale price derivation."""

    def test_bgn_cost_back_fills_eur(self):
        prices = resolve_product_prices({'cost_bgn': '19.56'})
        assert prices['cost_eur'] == Decimal('10')
        assert prices['markup'] == Decimal('30')
        assert prices['sale_bgn'] == Decimal('19.56') / Decimal('0.7')

    def test_eur_cost_back_fills_bgn(self):
        prices = resolve_product_prices({'cost_eur': '10'})
        assert prices['cost_bgn'] == Decimal('19.560')

    def test_explicit_values_win(self):
        prices = resolve_product_prices({
            'cost_bgn': '40', 'cost_eur': '21', 'sale_bgn': '55', 'sale_eur': '28', 'markup': '25',
        })
        assert prices == {
            'cost_bgn': Decimal('40'),
            'cost_eur': Decimal('21'),
            'sale_bgn': Decimal('55'),
            'sale_eur': Decimal('28'),
            'markup': Decimal('25'),
        }

    def test_default_markup_used_when_missing(self):
        prices = resolve_product_prices({'cost_bgn': '70'}, default_markup=20)
        assert prices['markup'] == Decimal('20')
        assert prices['sale_bgn'] == Decimal('87.5')

    def test_zero_markup_is_kept(self):
        prices = resolve_product_prices({'cost_bgn': '70', 'markup': 0})
        assert prices['markup'] == Decimal('0')
        assert prices['sale_bgn'] == Decimal('70')

    def test_no_cost_means_no_sale_price(self):
        prices = resolve_product_prices({})
        assert prices['sale_bgn'] == Decimal('0')
        assert prices['sale_eur'] == Decimal('0')

    def test_rate_helpers(self):
        assert EUR_TO_BGN_RATE == Decimal('1.956')
        assert eur_to_bgn(Decimal('100')) == Decimal('195.600')
        assert bgn_to_eur(Decimal('195.6')) == Decimal('100')
