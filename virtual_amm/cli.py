#!/usr/bin/env python3
"""Command-line interface for market quoting and swap simulation."""

import logging
from decimal import Decimal
from typing import Optional

import click
from dotenv import load_dotenv

from .config import ConfigManager
from .core import SwapRequest, Trend, VirtualPosition
from .market import MarketQuoter


def _fmt(value: Decimal) -> str:
    return format(value, 'f')


def _load_quoter(ctx, market: str) -> MarketQuoter:
    config_manager = ctx.obj['config_manager']
    try:
        config_manager.load()
        params = config_manager.get_market(market)
        return MarketQuoter(params, config_manager.get_context())
    except (FileNotFoundError, ValueError, KeyError) as e:
        raise click.ClickException(str(e))


def _echo_position(label: str, position: VirtualPosition):
    click.echo(f"  {label} position:")
    click.echo(f"    lower sqrt price: {_fmt(position.lower_sqrt_price)}")
    click.echo(f"    upper sqrt price: {_fmt(position.upper_sqrt_price)}")
    click.echo(f"    liquidity:        {_fmt(position.liquidity)}")


market_inputs = [
    click.option('--price', '-p', required=True, help='Oracle price (quote per base)'),
    click.option('--base-reserves', '-b', required=True, help='Base reserves in raw units'),
    click.option('--quote-reserves', '-q', required=True, help='Quote reserves in raw units'),
    click.option('--trend', type=click.Choice([t.value for t in Trend]), default=Trend.RANGE.value,
                 help='Trend signal (reversion strategy)'),
    click.option('--cached-price', default='0', help='Cached reference price (reversion strategy)'),
]


def with_market_inputs(func):
    for option in reversed(market_inputs):
        func = option(func)
    return func


@click.group()
@click.option('--config', '-c', default='config.yaml', help='Path to configuration file')
@click.option('--log-level', '-l', default='WARNING',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level')
@click.pass_context
def cli(ctx, config: str, log_level: str):
    """Virtual AMM quoting and swap simulation tool."""
    load_dotenv()

    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['log_level'] = log_level
    ctx.obj['config_manager'] = ConfigManager(config)

    # Setup basic logging (will be overridden by config)
    logging.basicConfig(level=getattr(logging, log_level))


@cli.command()
@click.pass_context
def markets(ctx):
    """List configured markets."""
    config_manager = ctx.obj['config_manager']
    try:
        config = config_manager.load()
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    click.echo("Configured markets:")
    for market_id, params in config.markets.items():
        click.echo(
            f"  - {market_id}: {params.base_symbol}/{params.quote_symbol} "
            f"({params.strategy}, fee {_fmt(params.fee_rate)})"
        )


@cli.command()
@click.pass_context
def validate_config(ctx):
    """Validate configuration file."""
    config_manager = ctx.obj['config_manager']

    try:
        config = config_manager.load()
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        ctx.exit(1)

    click.echo("Configuration is valid")
    click.echo(f"\nConfiguration summary:")
    click.echo(f"  Markets: {len(config.markets)}")
    click.echo(f"  Precision: {config.arithmetic.precision}")
    click.echo(f"  Rounding: {config.arithmetic.rounding}")


@cli.command()
@click.argument('market')
@with_market_inputs
@click.pass_context
def quote(ctx, market: str, price: str, base_reserves: str, quote_reserves: str,
          trend: str, cached_price: str):
    """Show bid/ask ranges and virtual positions for a market."""
    quoter = _load_quoter(ctx, market)
    logger = logging.getLogger(__name__)

    try:
        spread = quoter.quote_ranges(price, base_reserves, quote_reserves, Trend(trend), cached_price)
        bid, ask = quoter.virtual_positions(price, base_reserves, quote_reserves, Trend(trend), cached_price)
        delta = quoter.delta(price, base_reserves, quote_reserves)
    except ValueError as e:
        raise click.ClickException(str(e))

    logger.info(f"Quoted {market} at oracle price {price}")
    click.echo(f"Market: {market} ({quoter.params.strategy})")
    click.echo(f"  skew delta: {_fmt(delta)}")
    click.echo(f"  bid limits: [{_fmt(spread.bid.lower_limit)}, {_fmt(spread.bid.upper_limit)}]")
    click.echo(f"  ask limits: [{_fmt(spread.ask.lower_limit)}, {_fmt(spread.ask.upper_limit)}]")
    _echo_position("bid", bid)
    _echo_position("ask", ask)


@cli.command()
@click.argument('market')
@with_market_inputs
@click.option('--buy/--sell', 'is_buy', default=True, help='Buy or sell base')
@click.option('--exact-input/--exact-output', default=True, help='Fix the input or the output amount')
@click.option('--amount', '-a', required=True, help='Swap amount in raw units')
@click.option('--threshold-sqrt-price', default=None, help='Sqrt price limit')
@click.option('--threshold-amount', default=None, help='Minimum output / maximum input')
@click.pass_context
def swap(ctx, market: str, price: str, base_reserves: str, quote_reserves: str,
         trend: str, cached_price: str, is_buy: bool, exact_input: bool, amount: str,
         threshold_sqrt_price: Optional[str], threshold_amount: Optional[str]):
    """Simulate a swap against a market's virtual positions."""
    quoter = _load_quoter(ctx, market)

    request = SwapRequest(
        is_buy=is_buy,
        exact_input=exact_input,
        amount=amount,
        fee_rate=quoter.params.fee_rate,
        threshold_sqrt_price=threshold_sqrt_price,
        threshold_amount=threshold_amount
    )
    outcome = quoter.simulate_swap(request, price, base_reserves, quote_reserves, Trend(trend), cached_price)

    if not outcome.ok:
        click.echo(f"Swap failed: {type(outcome.error).__name__}: {outcome.error}", err=True)
        ctx.exit(1)

    result = outcome.result
    click.echo(f"Market: {market} ({'buy' if is_buy else 'sell'}, "
               f"{'exact input' if exact_input else 'exact output'})")
    click.echo(f"  amount in:       {_fmt(result.amount_in)}")
    click.echo(f"  amount out:      {_fmt(result.amount_out)}")
    click.echo(f"  fees:            {_fmt(result.fees)}")
    click.echo(f"  next sqrt price: {_fmt(result.next_sqrt_price)}")


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
