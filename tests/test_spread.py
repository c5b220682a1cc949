"""
Unit tests for the spread engine.
"""

import unittest
from decimal import Decimal

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from virtual_amm.core import DomainError, PositionRange, SpreadQuote, Trend
from virtual_amm.math import OFFSET, limit_to_sqrt_price, price_to_limit
from virtual_amm.spread import (
    get_skew, get_delta, get_virtual_position,
    BasicStrategy, ReplicatingStrategy, ReversionStrategy
)

LIMIT_ONE = Decimal(OFFSET)


def _range(lower, upper):
    return PositionRange(Decimal(lower), Decimal(upper))


class TestSkewAndDelta(unittest.TestCase):
    """Test cases for inventory skew helpers."""

    def test_balanced_reserves(self):
        self.assertEqual(get_skew(1000, 1000, 1), Decimal(0))
        self.assertEqual(get_delta(500, 1000, 1000, 1), Decimal(0))

    def test_skew_bounds(self):
        self.assertEqual(get_skew(0, 1000, 1), Decimal(1))
        self.assertEqual(get_skew(1000, 0, 1), Decimal(-1))
        self.assertEqual(get_skew(0, 0, 1), Decimal(0))

    def test_skew_truncated_toward_zero(self):
        """Skew keeps four decimal places, truncating toward zero."""
        self.assertEqual(get_skew(1, 2, 1), Decimal("0.3333"))
        self.assertEqual(get_skew(2, 1, 1), Decimal("-0.3333"))
        self.assertEqual(get_skew(1000, 3000, 1), Decimal("0.5"))

    def test_skew_uses_price(self):
        """Base reserves are valued at the price."""
        self.assertEqual(get_skew(1, 2000, 2000), Decimal(0))
        self.assertGreater(get_skew(1, 2000, 1000), 0)

    def test_delta_sign_follows_skew(self):
        """Excess quote shifts the quote up, excess base shifts it down."""
        self.assertEqual(get_delta(500, 1000, 3000, 1), Decimal(250))
        self.assertEqual(get_delta(1000, 2, 1, 1), Decimal(-333))

    def test_invalid_inputs(self):
        with self.assertRaises(DomainError):
            get_skew(-1, 10, 1)
        with self.assertRaises(DomainError):
            get_skew(1, 10, 0)


class TestVirtualPosition(unittest.TestCase):
    """Test cases for virtual position construction."""

    def test_bid_funded_by_quote(self):
        position = get_virtual_position(True, OFFSET, OFFSET + 1000, 1000)
        self.assertEqual(position.lower_sqrt_price, Decimal(1))
        self.assertEqual(position.upper_sqrt_price, limit_to_sqrt_price(OFFSET + 1000, 1))
        expected = Decimal(1000) / (position.upper_sqrt_price - position.lower_sqrt_price)
        self.assertLess(abs(position.liquidity - expected) / expected, Decimal("1e-20"))

    def test_ask_funded_by_base(self):
        position = get_virtual_position(False, OFFSET, OFFSET + 1000, 1000)
        lower, upper = position.lower_sqrt_price, position.upper_sqrt_price
        expected = Decimal(1000) * (upper * lower) / (upper - lower)
        self.assertLess(abs(position.liquidity - expected) / expected, Decimal("1e-20"))
        self.assertFalse(position.is_degenerate)

    def test_zero_amount(self):
        position = get_virtual_position(True, OFFSET, OFFSET + 1000, 0)
        self.assertEqual(position.liquidity, 0)
        self.assertTrue(position.is_degenerate)

    def test_zeroed_range(self):
        """A side that is not quoted has no liquidity."""
        position = get_virtual_position(False, 0, 0, 1000)
        self.assertEqual(position.liquidity, 0)
        self.assertTrue(position.is_degenerate)


class TestBasicStrategy(unittest.TestCase):
    """Test cases for BasicStrategy."""

    def test_symmetric_quote(self):
        strategy = BasicStrategy(min_spread=25, range=5000)
        quote = strategy.quote(1)
        self.assertIsInstance(quote, SpreadQuote)
        self.assertEqual(quote.bid, _range(OFFSET - 5025, OFFSET - 25))
        self.assertEqual(quote.ask, _range(OFFSET + 25, OFFSET + 5025))

    def test_skew_shifts_both_sides(self):
        strategy = BasicStrategy(min_spread=25, range=5000, max_delta=500)
        quote = strategy.quote(1, base_reserves=1000, quote_reserves=3000)
        self.assertEqual(quote.bid.upper_limit, LIMIT_ONE - 25 + 250)
        self.assertEqual(quote.ask.lower_limit, LIMIT_ONE + 25 + 250)

    def test_bid_rounds_down_ask_rounds_up(self):
        strategy = BasicStrategy(min_spread=25, range=5000)
        quote = strategy.quote("0.995")
        self.assertEqual(quote.bid.upper_limit, Decimal(7906123 - 25))
        self.assertEqual(quote.ask.lower_limit, Decimal(7906124 + 25))

    def test_zero_oracle_price(self):
        with self.assertRaises(DomainError):
            BasicStrategy(min_spread=25, range=5000).quote(0)


class TestReplicatingStrategy(unittest.TestCase):
    """Test cases for ReplicatingStrategy."""

    def test_no_min_spread(self):
        """Without skew both sides meet at the oracle limit."""
        quote = ReplicatingStrategy(range=1000).quote(1)
        self.assertEqual(quote.bid, _range(OFFSET - 1000, OFFSET))
        self.assertEqual(quote.ask, _range(OFFSET, OFFSET + 1000))

    def test_decimals_scale_oracle_price(self):
        """The oracle price is converted to raw units before quoting."""
        quote = ReplicatingStrategy(range=1000).quote(2000, base_decimals=18, quote_decimals=6)
        raw_price = Decimal("2E-9")
        self.assertEqual(quote.bid.upper_limit, price_to_limit(raw_price, 1))
        self.assertEqual(quote.ask.lower_limit, price_to_limit(raw_price, 1, round_up=True))
        self.assertEqual(quote.ask.lower_limit - quote.bid.upper_limit, 1)

    def test_skew_anchor(self):
        """Excess quote moves both anchors up by delta."""
        strategy = ReplicatingStrategy(range=1000, max_delta=500)
        quote = strategy.quote(1, base_reserves=1000, quote_reserves=3000)
        self.assertEqual(quote.bid.upper_limit, LIMIT_ONE + 250)
        self.assertEqual(quote.ask.lower_limit, LIMIT_ONE + 250)
        self.assertEqual(quote.ask.upper_limit, LIMIT_ONE + 1250)

    def test_scales_flag(self):
        self.assertTrue(ReplicatingStrategy.scales_oracle_price)
        self.assertFalse(BasicStrategy.scales_oracle_price)


class TestReversionStrategy(unittest.TestCase):
    """Test cases for ReversionStrategy hysteresis."""

    def setUp(self):
        self.strategy = ReversionStrategy(range=1000)

    def _quote(self, trend, cached_price, oracle_price):
        return self.strategy.quote(oracle_price, trend=trend, cached_price=cached_price)

    def test_range_is_symmetric(self):
        quote = self._quote(Trend.RANGE, 1, 1)
        self.assertEqual(quote.bid, _range(OFFSET - 1000, OFFSET))
        self.assertEqual(quote.ask, _range(OFFSET, OFFSET + 1000))

    def test_range_ignores_cached_price(self):
        quote = self._quote(Trend.RANGE, 1, "1.1")
        self.assertEqual(quote.bid, _range(7915156, 7916156))
        self.assertEqual(quote.ask, _range(7916156, 7917156))

    def test_up_price_rising_follows_with_bid(self):
        quote = self._quote(Trend.UP, 1, "1.1")
        self.assertEqual(quote.bid, _range(7915156, 7916156))
        self.assertTrue(quote.ask.is_zero)

    def test_up_price_unchanged(self):
        quote = self._quote(Trend.UP, 1, 1)
        self.assertEqual(quote.bid, _range(OFFSET - 1000, OFFSET))
        self.assertTrue(quote.ask.is_zero)

    def test_up_price_pulling_back(self):
        """Bid stays pinned to the cached lower edge, ask covers the gap."""
        quote = self._quote(Trend.UP, 1, "0.995")
        self.assertEqual(quote.bid, _range(OFFSET - 1000, 7906123))
        self.assertEqual(quote.ask, _range(7906123, OFFSET))

    def test_up_price_crossed_cached_bid(self):
        quote = self._quote(Trend.UP, 1, "0.95")
        self.assertTrue(quote.bid.is_zero)
        self.assertEqual(quote.ask, _range(OFFSET - 1000, OFFSET))

    def test_up_without_cached_price(self):
        """A zero cached price falls back to the oracle price."""
        limit = price_to_limit("0.9", 1)
        quote = self._quote(Trend.UP, 0, "0.9")
        self.assertEqual(quote.bid, PositionRange(limit - 1000, limit))
        self.assertTrue(quote.ask.is_zero)

    def test_down_price_falling_follows_with_ask(self):
        limit = price_to_limit("0.9", 1)
        quote = self._quote(Trend.DOWN, 1, "0.9")
        self.assertTrue(quote.bid.is_zero)
        self.assertEqual(quote.ask, PositionRange(limit, limit + 1000))

    def test_down_price_unchanged(self):
        quote = self._quote(Trend.DOWN, 1, 1)
        self.assertTrue(quote.bid.is_zero)
        self.assertEqual(quote.ask, _range(OFFSET, OFFSET + 1000))

    def test_down_price_bouncing(self):
        """Ask stays pinned to the cached upper edge, bid covers the gap."""
        quote = self._quote(Trend.DOWN, 1, "1.005")
        self.assertEqual(quote.bid, _range(OFFSET, 7907123))
        self.assertEqual(quote.ask, _range(7907123, OFFSET + 1000))

    def test_down_price_crossed_cached_ask(self):
        quote = self._quote(Trend.DOWN, 1, "1.05")
        self.assertEqual(quote.bid, _range(OFFSET, OFFSET + 1000))
        self.assertTrue(quote.ask.is_zero)

    def test_zero_oracle_price(self):
        with self.assertRaises(DomainError):
            self._quote(Trend.RANGE, 1, 0)


if __name__ == '__main__':
    unittest.main()
