"""Configuration management for billing-stats."""

import os
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable

from billing_stats.exceptions import ConfigurationError

DEFAULT_CONSUMPTION_LIMIT = 200_000.0


@dataclass
class ParserConfig:
    """Input file parsing configuration."""

    delimiter: str = "|"
    encoding: str = "utf-8"
    consumption_limit: float = DEFAULT_CONSUMPTION_LIMIT
    debug: bool = False

    def __post_init__(self) -> None:
        if not self.delimiter:
            raise ConfigurationError("delimiter must not be empty")
        if self.consumption_limit < 0:
            raise ConfigurationError(
                f"consumption_limit must be non-negative, got {self.consumption_limit}"
            )


@dataclass
class GeneratorConfig:
    """Synthetic dataset configuration."""

    num_customers: int = 100
    months: int = 12
    start_date: date = date(2023, 1, 1)
    dual_fuel_rate: float = 0.30
    other_service_rate: float = 0.02
    missed_read_rate: float = 0.10
    invalid_line_rate: float = 0.0
    exception_code_rate: float = 0.05
    locale: str = "en_US"


@dataclass
class AnalysisConfig:
    """Main configuration for billing-stats."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "AnalysisConfig":
        """Create config from environment variables."""
        parser = ParserConfig(
            encoding=os.getenv("INPUT_ENCODING", "utf-8"),
            consumption_limit=_env_number(
                "CONSUMPTION_LIMIT", float, DEFAULT_CONSUMPTION_LIMIT
            ),
            debug=os.getenv("PARSE_DEBUG", "false").lower() == "true",
        )

        generator = GeneratorConfig(
            num_customers=_env_number("NUM_CUSTOMERS", int, 100),
            invalid_line_rate=_env_number("INVALID_LINE_RATE", float, 0.0),
        )

        return cls(
            parser=parser,
            generator=generator,
            seed=_env_number("SEED", int, None),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _env_number(name: str, convert: Callable[[str], Any], default: Any) -> Any:
    """Read a numeric environment variable, falling back to default when unset."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return convert(raw)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from e
