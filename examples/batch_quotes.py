#!/usr/bin/env python3
"""Example script quoting several markets and simulating a sell on each."""

import sys
from decimal import Decimal
from pathlib import Path

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

from virtual_amm.config import ConfigManager
from virtual_amm.core import SwapRequest, Trend
from virtual_amm.market import MarketQuoter


def quote_multiple_markets():
    """Quote each market with sample reserves and sell one base token into its bid."""

    # Load configuration
    config_manager = ConfigManager("config.example.yaml")
    config = config_manager.load()
    ctx = config_manager.get_context()

    # (market, oracle price, base reserves in whole tokens, quote reserves in whole tokens, trend)
    scenarios = [
        ("eth_usdc", Decimal("2000"), Decimal("10"), Decimal("20000"), Trend.RANGE),
        ("eth_usdc", Decimal("2000"), Decimal("5"), Decimal("30000"), Trend.RANGE),
        ("eth_dai", Decimal("2000"), Decimal("10"), Decimal("20000"), Trend.RANGE),
        ("wbtc_eth", Decimal("15"), Decimal("2"), Decimal("30"), Trend.UP),
    ]

    results_summary = []

    for market_id, price, base_whole, quote_whole, trend in scenarios:
        try:
            print(f"\nQuoting {market_id} at {price} ({trend.value})...")

            params = config_manager.get_market(market_id)
            quoter = MarketQuoter(params, ctx)

            base_reserves = base_whole * Decimal(10) ** params.base_decimals
            quote_reserves = quote_whole * Decimal(10) ** params.quote_decimals

            spread = quoter.quote_ranges(price, base_reserves, quote_reserves, trend, price)

            request = SwapRequest(
                is_buy=False,
                exact_input=True,
                amount=Decimal(10) ** params.base_decimals,
                fee_rate=params.fee_rate
            )
            outcome = quoter.simulate_swap(request, price, base_reserves, quote_reserves, trend, price)
            result = outcome.unwrap()

            amount_out = result.amount_out / Decimal(10) ** params.quote_decimals
            results_summary.append({
                'market': market_id,
                'strategy': params.strategy,
                'bid': spread.bid,
                'ask': spread.ask,
                'amount_out': amount_out,
                'fees': result.fees / Decimal(10) ** params.base_decimals
            })

            print(f"  ✓ Sold 1 {params.base_symbol} for {amount_out:.6f} {params.quote_symbol}")

        except (KeyError, ValueError) as e:
            print(f"  ✗ Failed: {e}")
            results_summary.append({
                'market': market_id,
                'strategy': None,
                'error': str(e)
            })

    # Print summary
    print("\n" + "=" * 80)
    print("BATCH QUOTE SUMMARY")
    print("=" * 80)

    for result in results_summary:
        if 'error' in result:
            print(f"\n{result['market']}: ERROR - {result['error']}")
        else:
            print(f"\n{result['market']} - {result['strategy']}:")
            print(f"  Bid limits: [{result['bid'].lower_limit}, {result['bid'].upper_limit}]")
            print(f"  Ask limits: [{result['ask'].lower_limit}, {result['ask'].upper_limit}]")
            print(f"  Amount out: {result['amount_out']:.6f}")
            print(f"  Fees (base): {result['fees']:.8f}")


if __name__ == "__main__":
    quote_multiple_markets()
