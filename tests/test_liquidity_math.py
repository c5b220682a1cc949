"""
Unit tests for liquidity mathematics.
"""

import unittest
from decimal import Decimal

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from virtual_amm.core import DomainError, TokenAmounts
from virtual_amm.math import (
    add_delta, liquidity_to_quote, liquidity_to_base, quote_to_liquidity,
    base_to_liquidity, liquidity_to_amounts, amounts_to_liquidity
)

EPSILON = Decimal("1e-60")


class TestLiquidityConversions(unittest.TestCase):
    """Test cases for liquidity to amount conversions."""

    def test_liquidity_to_quote(self):
        self.assertEqual(liquidity_to_quote(1, 2, 10), Decimal(10))
        self.assertEqual(liquidity_to_quote("0.5", "0.75", 100), Decimal(25))

    def test_liquidity_to_base(self):
        self.assertEqual(liquidity_to_base(1, 2, 10), Decimal(5))

    def test_inverses(self):
        """Amount to liquidity undoes liquidity to amount."""
        self.assertEqual(quote_to_liquidity(1, 2, 10), Decimal(10))
        self.assertEqual(base_to_liquidity(1, 2, 5), Decimal(10))

        lower, upper, liquidity = Decimal("0.9"), Decimal("1.3"), Decimal("12345.678")
        quote = liquidity_to_quote(lower, upper, liquidity)
        base = liquidity_to_base(lower, upper, liquidity)
        self.assertLess(abs(quote_to_liquidity(lower, upper, quote) - liquidity), EPSILON)
        self.assertLess(abs(base_to_liquidity(lower, upper, base) - liquidity), EPSILON)

    def test_zero_width_interval(self):
        """Liquidity cannot be derived from a zero-width interval."""
        with self.assertRaises(DomainError):
            quote_to_liquidity(1, 1, 10)
        with self.assertRaises(DomainError):
            base_to_liquidity(2, 2, 10)

    def test_add_delta(self):
        self.assertEqual(add_delta(10, -3), Decimal(7))
        self.assertEqual(add_delta("1.5", "0.5"), Decimal(2))
        self.assertEqual(add_delta(3, -3), Decimal(0))

    def test_add_delta_never_negative(self):
        """Liquidity should never be negative."""
        with self.assertRaises(DomainError):
            add_delta(1, -2)


class TestLiquidityToAmounts(unittest.TestCase):
    """Test cases for splitting liquidity at the current price."""

    def setUp(self):
        self.liquidity = Decimal(100)
        self.lower = Decimal(1)
        self.upper = Decimal(2)

    def test_price_above_range(self):
        """When the range is below the price, liquidity is all quote."""
        amounts = liquidity_to_amounts(self.liquidity, 3, self.lower, self.upper)
        self.assertIsInstance(amounts, TokenAmounts)
        self.assertEqual(amounts.base_amount, 0)
        self.assertEqual(amounts.quote_amount, Decimal(100))

    def test_price_below_range(self):
        """When the range is above the price, liquidity is all base."""
        amounts = liquidity_to_amounts(self.liquidity, "0.5", self.lower, self.upper)
        self.assertEqual(amounts.base_amount, Decimal(50))
        self.assertEqual(amounts.quote_amount, 0)

    def test_price_at_lower_edge(self):
        amounts = liquidity_to_amounts(self.liquidity, 1, self.lower, self.upper)
        self.assertGreater(amounts.base_amount, 0)
        self.assertEqual(amounts.quote_amount, 0)

    def test_price_within_range(self):
        """Inside the range the split matches the partial calculations."""
        curr = Decimal("1.5")
        amounts = liquidity_to_amounts(self.liquidity, curr, self.lower, self.upper)
        self.assertGreater(amounts.base_amount, 0)
        self.assertGreater(amounts.quote_amount, 0)
        self.assertEqual(amounts.base_amount, liquidity_to_base(curr, self.upper, self.liquidity))
        self.assertEqual(amounts.quote_amount, liquidity_to_quote(self.lower, curr, self.liquidity))
        self.assertEqual(amounts.quote_amount, Decimal(50))

    def test_amounts_to_liquidity(self):
        """Reserves map back to the liquidity that produced them."""
        curr = Decimal("1.5")
        amounts = liquidity_to_amounts(self.liquidity, curr, self.lower, self.upper)
        liquidity = amounts_to_liquidity(
            amounts.base_amount, amounts.quote_amount, curr, self.lower, self.upper
        )
        self.assertLess(abs(liquidity - self.liquidity), EPSILON)

        self.assertEqual(amounts_to_liquidity(50, 0, "0.5", self.lower, self.upper), Decimal(100))
        self.assertEqual(amounts_to_liquidity(0, 100, 3, self.lower, self.upper), Decimal(100))

    def test_amounts_to_liquidity_limited_by_scarcer_side(self):
        """The scarcer token bounds the liquidity."""
        curr = Decimal("1.5")
        liquidity = amounts_to_liquidity(1000, 50, curr, self.lower, self.upper)
        self.assertEqual(liquidity, Decimal(100))


if __name__ == '__main__':
    unittest.main()
