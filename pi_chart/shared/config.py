#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration System for the Pi price chart
Handles YAML configuration loading, validation, and type conversion.
"""

import copy
import yaml
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging


@dataclass
class FeedConfig:
    """Price feed (CoinGecko) configuration"""
    base_url: str = "https://api.coingecko.com/api/v3"
    coin_id: str = "pi-network"
    vs_currency: str = "usd"
    timeout: int = 10
    retries: int = 0
    refresh_seconds: int = 60

    def __post_init__(self):
        """Validate feed parameters"""
        if not self.base_url:
            raise ValueError("feed base_url cannot be empty")
        if not self.coin_id:
            raise ValueError("feed coin_id cannot be empty")
        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")
        if self.retries < 0:
            raise ValueError("retries cannot be negative")
        if self.refresh_seconds <= 0:
            raise ValueError("refresh_seconds must be positive")


@dataclass
class LedgerConfig:
    """Ledger (Pi mainnet Horizon) configuration"""
    base_url: str = "https://api.mainnet.minepi.com"
    page_limit: int = 200
    max_events: int = 2000          # safety cap on relevant events
    max_pages: int = 100            # safety cap on pages, even if nothing is relevant
    cutoff: datetime = field(default_factory=lambda: datetime(2025, 1, 1, tzinfo=timezone.utc))
    timeout: int = 15

    def __post_init__(self):
        """Validate ledger parameters"""
        if not self.base_url:
            raise ValueError("ledger base_url cannot be empty")
        if not (1 <= self.page_limit <= 200):
            raise ValueError("page_limit must be between 1 and 200")
        if self.max_events <= 0:
            raise ValueError("max_events must be positive")
        if self.max_pages <= 0:
            raise ValueError("max_pages must be positive")
        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")
        if self.cutoff.tzinfo is None:
            self.cutoff = self.cutoff.replace(tzinfo=timezone.utc)


@dataclass
class Margins:
    """Pixel insets of the plotting rectangle"""
    left: int = 56
    right: int = 10
    top: int = 10
    bottom: int = 60   # room for time labels

    def __post_init__(self):
        if min(self.left, self.right, self.top, self.bottom) < 0:
            raise ValueError("Margins cannot be negative")


@dataclass
class ChartStyle:
    """Chart geometry, ticks and colors"""
    height: int = 360
    default_width: int = 900
    dpi: int = 100
    margins: Margins = field(default_factory=Margins)
    price_ticks: int = 5
    time_ticks: int = 6
    time_ticks_by_mode: Dict[str, int] = field(default_factory=dict)
    currency_symbol: str = "$"
    timezone: str = "UTC"
    line_color: str = "#2dd4bf"
    line_width: float = 2.0
    grid_color: str = "#78c8a038"
    label_color: str = "#7fbf86"
    label_font_size: int = 11
    marker_radius: float = 5.0
    marker_outline: str = "#00000099"
    marker_outline_width: float = 1.5
    color_in: str = "#58b86a"
    color_out: str = "#e15759"
    color_self: str = "#facc15"

    def __post_init__(self):
        """Validate chart style"""
        if self.height <= 0 or self.default_width <= 0:
            raise ValueError("Chart dimensions must be positive")
        if self.dpi <= 0:
            raise ValueError("DPI must be positive")
        if self.price_ticks < 1 or self.time_ticks < 1:
            raise ValueError("Tick counts must be >= 1")
        # Mode keys are stored upper-case ("D", "W", ...)
        self.time_ticks_by_mode = {
            str(k).strip().upper(): int(v) for k, v in self.time_ticks_by_mode.items()
        }
        if any(v < 1 for v in self.time_ticks_by_mode.values()):
            raise ValueError("Tick counts must be >= 1")

    def time_ticks_for(self, mode_token: str) -> int:
        return self.time_ticks_by_mode.get(mode_token.upper(), self.time_ticks)


@dataclass
class TelemetryConfig:
    """Prometheus exposition"""
    enabled: bool = False
    listen_address: str = "0.0.0.0"
    listen_port: int = 9108

    def __post_init__(self):
        if not (1 <= self.listen_port <= 65535):
            raise ValueError("Port must be between 1 and 65535")


@dataclass
class AppConfig:
    """Main application configuration"""
    feed: FeedConfig = field(default_factory=FeedConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    chart: ChartStyle = field(default_factory=ChartStyle)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    output_dir: str = "output"
    default_timeframe: str = "D"
    logging_level: str = "INFO"

    def __post_init__(self):
        """Validate main configuration"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level.upper() not in valid_levels:
            raise ValueError(f"logging_level must be one of: {valid_levels}")
        self.logging_level = self.logging_level.upper()

        self.default_timeframe = (self.default_timeframe or "D").strip().upper()
        if self.default_timeframe not in {"D", "W", "M", "Y", "A"}:
            raise ValueError("default_timeframe must be one of D, W, M, Y, A")


class ConfigError(Exception):
    """Configuration-related errors"""
    pass


def _parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse datetime from various formats

    Args:
        value: String, datetime, or None

    Returns:
        Parsed UTC datetime or None

    Raises:
        ConfigError: If datetime format is invalid
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    # unquoted YAML dates arrive as date objects
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, str):
        formats = [
            "%Y-%m-%dT%H:%M:%SZ",
            "%Y-%m-%dT%H:%M:%S",
            "%Y-%m-%d %H:%M:%S",
            "%Y-%m-%d"
        ]

        for fmt in formats:
            try:
                return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
            except ValueError:
                continue

        raise ConfigError(f"Invalid datetime format: {value}. Expected ISO format like '2025-01-01T00:00:00Z'")

    raise ConfigError(f"Datetime must be string or datetime object, got {type(value)}")


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name, {})
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' section must be a mapping")
    return value


def _load_raw_config(config_path: str) -> Dict[str, Any]:
    """
    Load raw configuration from YAML file

    Raises:
        ConfigError: If file cannot be loaded or parsed
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read {config_path}: {e}")

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(raw_config)}")

    return raw_config


def build_config(config_dict: Dict[str, Any]) -> AppConfig:
    """
    Build AppConfig from dictionary; missing sections fall back to defaults

    Raises:
        ConfigError: If configuration is invalid
    """
    try:
        feed_raw = _section(config_dict, "feed")
        feed = FeedConfig(
            base_url=feed_raw.get("base_url", FeedConfig.base_url),
            coin_id=feed_raw.get("coin_id", FeedConfig.coin_id),
            vs_currency=feed_raw.get("vs_currency", FeedConfig.vs_currency),
            timeout=int(feed_raw.get("timeout", FeedConfig.timeout)),
            retries=int(feed_raw.get("retries", FeedConfig.retries)),
            refresh_seconds=int(feed_raw.get("refresh_seconds", FeedConfig.refresh_seconds)),
        )

        ledger_raw = _section(config_dict, "ledger")
        ledger = LedgerConfig(
            base_url=ledger_raw.get("base_url", LedgerConfig.base_url),
            page_limit=int(ledger_raw.get("page_limit", LedgerConfig.page_limit)),
            max_events=int(ledger_raw.get("max_events", LedgerConfig.max_events)),
            max_pages=int(ledger_raw.get("max_pages", LedgerConfig.max_pages)),
            timeout=int(ledger_raw.get("timeout", LedgerConfig.timeout)),
        )
        cutoff = _parse_datetime(ledger_raw.get("cutoff"))
        if cutoff is not None:
            ledger.cutoff = cutoff

        chart_raw = _section(config_dict, "chart")
        margins_raw = _section(chart_raw, "margins")
        defaults = ChartStyle()
        chart_kwargs = {
            k: chart_raw[k] for k in (
                "height", "default_width", "dpi", "price_ticks", "time_ticks",
                "currency_symbol", "timezone", "line_color", "line_width",
                "grid_color", "label_color", "label_font_size", "marker_radius",
                "marker_outline", "marker_outline_width",
                "color_in", "color_out", "color_self",
            ) if k in chart_raw
        }
        chart = ChartStyle(
            margins=Margins(
                left=int(margins_raw.get("left", defaults.margins.left)),
                right=int(margins_raw.get("right", defaults.margins.right)),
                top=int(margins_raw.get("top", defaults.margins.top)),
                bottom=int(margins_raw.get("bottom", defaults.margins.bottom)),
            ),
            time_ticks_by_mode=dict(_section(chart_raw, "time_ticks_by_mode")),
            **chart_kwargs,
        )

        telemetry_raw = _section(config_dict, "telemetry")
        telemetry = TelemetryConfig(
            enabled=bool(telemetry_raw.get("enabled", False)),
            listen_address=str(telemetry_raw.get("listen_address", TelemetryConfig.listen_address)),
            listen_port=int(telemetry_raw.get("listen_port", TelemetryConfig.listen_port)),
        )

        return AppConfig(
            feed=feed,
            ledger=ledger,
            chart=chart,
            telemetry=telemetry,
            output_dir=str(config_dict.get("output_dir", "output")),
            default_timeframe=str(config_dict.get("default_timeframe", "D")),
            logging_level=str(_section(config_dict, "logging").get("level", "INFO")),
        )

    except (ValueError, TypeError) as e:
        raise ConfigError(f"Configuration validation failed: {e}")


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load and validate configuration from YAML file

    Args:
        config_path: Path to YAML configuration file; None yields defaults

    Raises:
        ConfigError: If configuration cannot be loaded or is invalid
    """
    if config_path is None:
        return AppConfig()
    raw_config = _load_raw_config(config_path)
    return build_config(raw_config)


def apply_cli_overrides(config: AppConfig, **overrides) -> AppConfig:
    """
    Apply command-line overrides to configuration

    Raises:
        ConfigError: If overrides are invalid
    """
    try:
        updated = copy.deepcopy(config)

        if overrides.get("timeframe"):
            updated.default_timeframe = str(overrides["timeframe"])
        if overrides.get("output_dir"):
            updated.output_dir = str(overrides["output_dir"])
        if overrides.get("log_level"):
            updated.logging_level = str(overrides["log_level"])
        if overrides.get("width"):
            updated.chart.default_width = int(overrides["width"])
        if overrides.get("timezone"):
            updated.chart.timezone = str(overrides["timezone"])

        # Re-validate after overrides
        updated.__post_init__()
        updated.chart.__post_init__()

        return updated

    except (ValueError, TypeError) as e:
        raise ConfigError(f"Failed to apply CLI overrides: {e}")


def summary_lines(config: AppConfig) -> List[str]:
    """Human readable summary lines used at startup"""
    return [
        f"feed={config.feed.base_url} coin={config.feed.coin_id} vs={config.feed.vs_currency}",
        f"ledger={config.ledger.base_url} cutoff={config.ledger.cutoff.isoformat()} cap={config.ledger.max_events}",
        f"chart={config.chart.default_width}x{config.chart.height} tz={config.chart.timezone}",
    ]


def setup_logging(config: AppConfig) -> None:
    """Setup logging based on configuration"""
    from .colored_logging import setup_colored_logging
    setup_colored_logging(level=getattr(logging, config.logging_level))
