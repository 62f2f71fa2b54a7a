"""Configuration loading and validation for the transaction analytics engine."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from transaction_analytics.utils.logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


def _as_float(data: dict[str, object], key: str, default: float) -> float:
    value = data.get(key, default)
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigError(f"'{key}' must be a number, got {value!r}") from None


def _as_int(data: dict[str, object], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}")
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}") from None


@dataclass
class AnalyticsConfig:
    """Thresholds used by the analytics passes and the summary.

    Changing these alters which records the summary reports.

    Attributes:
        suspicious_threshold: Scores strictly above this count as suspicious.
        anomaly_series_threshold: Scores strictly above this enter the
            anomaly series.
        score_decimal_places: Decimal places kept on anomaly scores.
        recurring_min_occurrences: Group size at which a normalized
            description is considered recurring.
    """

    suspicious_threshold: float = 2.0
    anomaly_series_threshold: float = 1.0
    score_decimal_places: int = 2
    recurring_min_occurrences: int = 2

    def __post_init__(self) -> None:
        if self.score_decimal_places < 0:
            raise ConfigError("'score_decimal_places' must be >= 0")
        if self.recurring_min_occurrences < 2:
            raise ConfigError("'recurring_min_occurrences' must be >= 2")

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "AnalyticsConfig":
        """Create from dictionary."""
        return cls(
            suspicious_threshold=_as_float(data, "suspicious_threshold", 2.0),
            anomaly_series_threshold=_as_float(data, "anomaly_series_threshold", 1.0),
            score_decimal_places=_as_int(data, "score_decimal_places", 2),
            recurring_min_occurrences=_as_int(data, "recurring_min_occurrences", 2),
        )


@dataclass
class OutputConfig:
    """Configuration for exports and console output.

    Attributes:
        date_format: Date format for display output.
        currency_symbol: Currency symbol for display.
        decimal_places: Number of decimal places for amounts.
        sanitize_formulas: Prefix formula-like text in CSV exports with a
            single quote. Off by default so that exports round-trip.
        csv_filename_prefix: Prefix of the default CSV export filename.
    """

    date_format: str = "%Y-%m-%d"
    currency_symbol: str = "$"
    decimal_places: int = 2
    sanitize_formulas: bool = False
    csv_filename_prefix: str = "bank_statement_batch"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "OutputConfig":
        """Create from dictionary."""
        return cls(
            date_format=str(data.get("date_format", "%Y-%m-%d")),
            currency_symbol=str(data.get("currency_symbol", "$")),
            decimal_places=_as_int(data, "decimal_places", 2),
            sanitize_formulas=bool(data.get("sanitize_formulas", False)),
            csv_filename_prefix=str(data.get("csv_filename_prefix", "bank_statement_batch")),
        )


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional path to a log file.
    """

    level: str = "INFO"
    file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        log_file = data.get("file")
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(log_file) if log_file else None,
        )


@dataclass
class Config:
    """Main configuration container.

    Attributes:
        analytics: Analytics thresholds.
        output: Output generation configuration.
        logging: Logging configuration.
    """

    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content (empty dict for an empty file).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def _section(data: dict[str, object], name: str) -> dict[str, object]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def load_settings(path: Path) -> Config:
    """Load settings from settings.yaml.

    Args:
        path: Path to settings.yaml.

    Returns:
        Config built from the file's sections.
    """
    data = load_yaml_file(path)
    return Config(
        analytics=AnalyticsConfig.from_dict(_section(data, "analytics")),
        output=OutputConfig.from_dict(_section(data, "output")),
        logging=LoggingConfig.from_dict(_section(data, "logging")),
    )


def load_config(
    settings_path: Optional[Path] = None,
    config_dir: Optional[Path] = None,
) -> Config:
    """Load configuration, falling back to defaults.

    Args:
        settings_path: Explicit settings.yaml path. Must exist when given.
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete Config object.

    Raises:
        FileNotFoundError: If an explicit settings_path is missing.
        ConfigError: If the settings file is invalid.
    """
    if settings_path is not None:
        config = load_settings(settings_path)
        logger.info(f"Loaded settings from {settings_path}")
        return config

    if config_dir is None:
        config_dir = Path("config")

    default_path = config_dir / "settings.yaml"
    if default_path.exists():
        config = load_settings(default_path)
        logger.info(f"Loaded settings from {default_path}")
        return config

    logger.warning(f"Settings file not found: {default_path}, using defaults")
    return Config()
