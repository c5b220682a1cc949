"""Configuration management with validation and type safety."""

import os
import re
import yaml
import logging
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from ..core.errors import EngineError
from ..math.context import ArithmeticContext, Rounding, DEFAULT_PRECISION, to_decimal
from ..math.fee_math import fee_rate_from_bps
from ..spread.strategies import STRATEGIES
from ..swap.fee_policies import FEE_POLICIES


@dataclass
class MarketParams:
    """Market quoting configuration."""
    name: str
    base_symbol: str
    quote_symbol: str
    base_decimals: int
    quote_decimals: int
    strategy: str
    fee_policy: str = "requested_input"
    fee_rate: Decimal = Decimal(0)
    min_spread: Decimal = Decimal(0)
    range: Decimal = Decimal(0)
    max_delta: Decimal = Decimal(0)


@dataclass
class ArithmeticConfig:
    """Decimal arithmetic configuration."""
    precision: int = DEFAULT_PRECISION
    rounding: str = "toward_zero"

    def to_context(self) -> ArithmeticContext:
        return ArithmeticContext(
            precision=self.precision,
            rounding=Rounding.from_name(self.rounding)
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""
    arithmetic: ArithmeticConfig
    logging: LoggingConfig
    markets: Dict[str, MarketParams] = field(default_factory=dict)


class ConfigManager:
    """Manages application configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to configuration file. Defaults to config.yaml
        """
        self.config_path = Path(config_path or "config.yaml")
        self._config_data: Optional[Dict[str, Any]] = None
        self._config: Optional[Config] = None
        self.logger = logging.getLogger(__name__)

    def load(self, setup_logging: bool = True) -> Config:
        """Load and parse configuration.

        Args:
            setup_logging: Configure the root logger from the logging section

        Returns:
            Parsed configuration object

        Raises:
            FileNotFoundError: If config file not found
            ValueError: If config is invalid
        """
        if self._config:
            return self._config

        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            self._config_data = yaml.safe_load(f) or {}

        # Substitute environment variables
        self._substitute_env_vars()

        self._config = self._parse_config(self._config_data)

        if setup_logging:
            self._setup_logging(self._config.logging)

        self.logger.debug(
            f"Loaded {len(self._config.markets)} markets from {self.config_path}"
        )
        return self._config

    def _substitute_env_vars(self):
        """Substitute environment variables in config."""
        def _substitute(obj):
            if isinstance(obj, str):
                # Look for ${VAR_NAME} pattern
                pattern = r'\$\{([^}]+)\}'
                matches = re.findall(pattern, obj)
                for var_name in matches:
                    env_value = os.getenv(var_name)
                    if env_value is None:
                        raise ValueError(f"Environment variable {var_name} not set")
                    obj = obj.replace(f"${{{var_name}}}", env_value)
                return obj
            elif isinstance(obj, dict):
                return {k: _substitute(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [_substitute(item) for item in obj]
            return obj

        self._config_data = _substitute(self._config_data)

    def _parse_config(self, data: Dict[str, Any]) -> Config:
        """Parse raw config data into typed configuration.

        Args:
            data: Raw configuration dictionary

        Returns:
            Parsed Config object
        """
        arithmetic_data = data.get('arithmetic') or {}
        arithmetic_config = ArithmeticConfig(
            precision=int(arithmetic_data.get('precision', DEFAULT_PRECISION)),
            rounding=arithmetic_data.get('rounding', 'toward_zero')
        )
        # Fail early on bad precision or rounding names
        arithmetic_config.to_context()

        logging_data = data.get('logging') or {}
        logging_config = LoggingConfig(
            level=str(logging_data.get('level', 'INFO')).upper(),
            format=logging_data.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
            file=logging_data.get('file')
        )
        if not isinstance(getattr(logging, logging_config.level, None), int):
            raise ValueError(f"Invalid logging level: {logging_config.level}")

        markets = {}
        for market_name, market_data in (data.get('markets') or {}).items():
            markets[market_name] = self._parse_market(market_name, market_data or {})

        return Config(
            arithmetic=arithmetic_config,
            logging=logging_config,
            markets=markets
        )

    def _parse_market(self, name: str, data: Dict[str, Any]) -> MarketParams:
        """Parse and validate one market section."""
        for key in ('base_symbol', 'quote_symbol', 'base_decimals', 'quote_decimals', 'strategy'):
            if key not in data:
                raise ValueError(f"Market '{name}' is missing required key '{key}'")

        strategy = str(data['strategy']).lower()
        if strategy not in STRATEGIES:
            raise ValueError(
                f"Market '{name}': unknown strategy '{strategy}', "
                f"expected one of {sorted(STRATEGIES)}"
            )

        fee_policy = str(data.get('fee_policy', 'requested_input')).lower()
        if fee_policy not in FEE_POLICIES:
            raise ValueError(
                f"Market '{name}': unknown fee_policy '{fee_policy}', "
                f"expected one of {sorted(FEE_POLICIES)}"
            )

        try:
            params = MarketParams(
                name=name,
                base_symbol=str(data['base_symbol']),
                quote_symbol=str(data['quote_symbol']),
                base_decimals=int(data['base_decimals']),
                quote_decimals=int(data['quote_decimals']),
                strategy=strategy,
                fee_policy=fee_policy,
                fee_rate=fee_rate_from_bps(str(data.get('fee_rate_bps', 0))),
                min_spread=to_decimal(str(data.get('min_spread', 0)), 'min_spread'),
                range=to_decimal(str(data.get('range', 0)), 'range'),
                max_delta=to_decimal(str(data.get('max_delta', 0)), 'max_delta')
            )
        except EngineError as e:
            raise ValueError(f"Market '{name}': {e}") from e

        if params.base_decimals < 0 or params.quote_decimals < 0:
            raise ValueError(f"Market '{name}': token decimals cannot be negative")
        if params.range <= 0:
            raise ValueError(f"Market '{name}': range must be positive")
        return params

    def _setup_logging(self, logging_config: LoggingConfig):
        """Setup logging based on configuration."""
        handlers = [logging.StreamHandler()]

        if logging_config.file:
            handlers.append(logging.FileHandler(logging_config.file))

        logging.basicConfig(
            level=getattr(logging, logging_config.level),
            format=logging_config.format,
            handlers=handlers
        )

    def get_market(self, market_id: str) -> MarketParams:
        """Get market parameters by ID.

        Args:
            market_id: Market identifier

        Returns:
            Market parameters

        Raises:
            KeyError: If market not found
        """
        if not self._config:
            self.load()

        if market_id not in self._config.markets:
            raise KeyError(f"Market '{market_id}' not found in configuration")

        return self._config.markets[market_id]

    def get_context(self) -> ArithmeticContext:
        """Arithmetic context described by the configuration."""
        if not self._config:
            self.load()
        return self._config.arithmetic.to_context()
