"""
Testes do CurrencyConverter e da formatação
"""

import asyncio

import pytest

from viewcoin.domain.currency import SupportedCurrency
from viewcoin.domain.errors import RateUnavailable
from viewcoin.services.converter import format_amount, format_display, format_label
from viewcoin.services.revenue import to_usd

from tests.conftest import PRICES


# =============================================================================
# Formatação
# =============================================================================


class TestFormatting:

    def test_small_amount_uses_five_decimals(self):
        assert format_amount(0.05) == "0.05000"
        assert format_amount(0.0000123) == "0.00001"

    def test_large_amount_uses_two_decimals(self):
        assert format_amount(1.2345) == "1.23"
        assert format_amount(26.0) == "26.00"

    def test_threshold_is_exclusive(self):
        assert format_amount(0.1) == "0.10"

    def test_display(self):
        assert format_display(0.01, 26.0) == "0.01000 ($26.00)"
        assert format_display(2.5, 0.05) == "2.50 ($0.05000)"

    def test_label_prefixes_symbol(self):
        assert format_label(SupportedCurrency.ETHEREUM, "0.01000 ($26.00)") == "Ξ 0.01000 ($26.00)"
        assert format_label(SupportedCurrency.BITCOIN, "x") == "₿ x"
        assert format_label(SupportedCurrency.DOGECOIN, "x") == "Ð x"


# =============================================================================
# Conversão
# =============================================================================


class TestToCrypto:

    def test_divides_by_price(self, converter):
        amount = asyncio.run(converter.to_crypto(26.0, SupportedCurrency.ETHEREUM))
        assert amount == pytest.approx(0.01)

    @pytest.mark.parametrize("currency", list(SupportedCurrency))
    @pytest.mark.parametrize("views", [0, 1, 12_340, 1_234_560, 4_700_000_000])
    def test_round_trip_with_fixed_price(self, converter, currency, views):
        usd = to_usd(views)
        crypto = asyncio.run(converter.to_crypto(usd, currency))
        assert crypto * PRICES[currency] == pytest.approx(usd)

    def test_missing_price_propagates(self, converter, price_source):
        del price_source.prices[SupportedCurrency.BITCOIN]

        with pytest.raises(RateUnavailable) as exc_info:
            asyncio.run(converter.to_crypto(26.0, SupportedCurrency.BITCOIN))

        assert exc_info.value.currency is SupportedCurrency.BITCOIN
