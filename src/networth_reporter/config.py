"""Configuration loading and validation for the net-worth reporter."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

import yaml

from networth_reporter.utils.date_utils import TimeRange
from networth_reporter.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_DIR = Path("config")
SETTINGS_FILENAME = "settings.yaml"


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


@dataclass
class ReportConfig:
    """Configuration for report computation.

    Attributes:
        default_range: Window used when none is given on the command line.
        include_inactive_accounts: Whether soft-deleted accounts count
            toward net worth.
        reconciliation_tolerance: Largest balance drift treated as rounding.
    """

    default_range: TimeRange = TimeRange.SIX_MONTHS
    include_inactive_accounts: bool = True
    reconciliation_tolerance: Decimal = field(default_factory=lambda: Decimal("0.01"))

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "ReportConfig":
        """Create from dictionary."""
        try:
            default_range = TimeRange.parse(str(data.get("default_range", "6m")))
        except ValueError as e:
            raise ConfigError(str(e)) from e

        tolerance_raw = data.get("reconciliation_tolerance", "0.01")
        try:
            tolerance = Decimal(str(tolerance_raw))
        except InvalidOperation:
            raise ConfigError(
                f"'reconciliation_tolerance' must be a number, got {tolerance_raw!r}"
            ) from None
        if not tolerance.is_finite() or tolerance < 0:
            raise ConfigError(
                f"'reconciliation_tolerance' must be a non-negative number, got {tolerance_raw!r}"
            )

        include_inactive = data.get("include_inactive_accounts", True)
        if not isinstance(include_inactive, bool):
            raise ConfigError(
                f"'include_inactive_accounts' must be true or false, got {include_inactive!r}"
            )

        return cls(
            default_range=default_range,
            include_inactive_accounts=include_inactive,
            reconciliation_tolerance=tolerance,
        )


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        date_format: Date format for exported dates.
        currency_symbol: Currency symbol for display.
        decimal_places: Number of decimal places.
    """

    date_format: str = "%Y-%m-%d"
    currency_symbol: str = "$"
    decimal_places: int = 2

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "OutputConfig":
        """Create from dictionary."""
        return cls(
            date_format=str(data.get("date_format", "%Y-%m-%d")),
            currency_symbol=str(data.get("currency_symbol", "$")),
            decimal_places=int(data.get("decimal_places", 2)),  # type: ignore[arg-type]
        )


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file.
    """

    level: str = "INFO"
    file: str = "networth_reporter.log"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(data.get("file", "networth_reporter.log")),
        )


@dataclass
class Config:
    """Main configuration container."""

    report: ReportConfig = field(default_factory=ReportConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content.

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
    """Load settings from a settings.yaml file.

    Args:
        path: Path to settings.yaml.

    Returns:
        Config built from the file, with defaults for missing sections.
    """
    data = load_yaml_file(path)

    try:
        output = OutputConfig.from_dict(_section(data, "output"))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid 'output' section: {e}") from e

    return Config(
        report=ReportConfig.from_dict(_section(data, "report")),
        output=output,
        logging=LoggingConfig.from_dict(_section(data, "logging")),
    )


def load_config(
    settings_path: Optional[Path] = None,
    config_dir: Optional[Path] = None,
) -> Config:
    """Load configuration, falling back to defaults when no file exists.

    An explicitly given settings path must exist; the default path
    (``config/settings.yaml``) is optional.

    Args:
        settings_path: Path to settings.yaml (or None to use default).
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete Config object.

    Raises:
        FileNotFoundError: If an explicit settings path is missing.
        ConfigError: If the settings file is invalid.
    """
    if settings_path is not None:
        config = load_settings(settings_path)
        logger.info(f"Loaded settings from {settings_path}")
        return config

    default_path = (config_dir or DEFAULT_CONFIG_DIR) / SETTINGS_FILENAME
    if default_path.exists():
        config = load_settings(default_path)
        logger.info(f"Loaded settings from {default_path}")
        return config

    logger.info(f"Settings file not found: {default_path}, using defaults")
    return Config()
