"""Configuration handling for stockroom report generation.

Settings live in an optional ``stockroom.ini`` file. Every option has a
default, so :class:`ReportSettings` can be constructed directly when no file
is present. The public API mirrors the three steps callers go through:

1. :func:`find_config_file` locates the file.
2. :func:`read_config` parses it into a ``ConfigParser``.
3. :func:`parse_settings` validates values into :class:`ReportSettings`.
"""

from __future__ import annotations

import configparser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import configure_log_file, log


CONFIG_FILE_NAME = "stockroom.ini"

DEFAULT_DOMAIN_TAG = "warehouse"
DEFAULT_CURRENCY_SYMBOL = "RUB"
DEFAULT_DATE_FORMAT = "%d.%m.%Y"
DEFAULT_THOUSANDS_SEPARATOR = ","
DEFAULT_TOP_PRODUCTS = 3
# Fraction of the page height, measured from the top edge, below which a
# following table is pushed onto a fresh page.
DEFAULT_PAGE_BREAK_RATIO = 0.85


@dataclass(frozen=True)
class ReportSettings:
    """Typed representation of the report options we care about."""

    domain_tag: str = DEFAULT_DOMAIN_TAG
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    date_format: str = DEFAULT_DATE_FORMAT
    thousands_separator: str = DEFAULT_THOUSANDS_SEPARATOR
    top_products: int = DEFAULT_TOP_PRODUCTS
    page_break_ratio: float = DEFAULT_PAGE_BREAK_RATIO
    # Directory for the rotating log file; None keeps the current location.
    log_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        if not self.domain_tag.strip():
            raise ValueError("DomainTag must not be empty")
        if self.top_products < 1:
            raise ValueError("TopProducts must be at least 1")
        if not 0 < self.page_break_ratio <= 1:
            raise ValueError("PageBreakRatio must be within (0, 1]")


def find_config_file(explicit_path: Optional[Path] = None) -> Path:
    """Locate the configuration file.

    An explicit path is returned as-is. Otherwise the search walks up from the
    current working directory toward the filesystem root and returns the first
    ``CONFIG_FILE_NAME`` it finds.

    Raises:
        FileNotFoundError: If no configuration file exists on the way up.
    """

    if explicit_path:
        return explicit_path

    current = Path.cwd()
    for candidate_dir in (current, *current.parents):
        candidate = candidate_dir / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate

    raise FileNotFoundError(f"Configuration file not found: {CONFIG_FILE_NAME}")


def read_config(config_path: Path) -> configparser.ConfigParser:
    """Load ``config_path`` into a ``ConfigParser``.

    Interpolation is disabled so ``DateFormat`` values such as ``%d.%m.%Y``
    are read literally.

    Raises:
        FileNotFoundError: If the file does not exist after ``~`` expansion.
    """

    config_path = Path(config_path).expanduser().resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    parser = configparser.ConfigParser(interpolation=None)
    parser.read(config_path, encoding="utf-8")
    return parser


def _optional_path(raw: str) -> Optional[Path]:
    raw = raw.strip()
    return Path(raw).expanduser() if raw else None


def parse_settings(parser: configparser.ConfigParser) -> ReportSettings:
    """Convert a ``ConfigParser`` into :class:`ReportSettings`.

    Missing sections or options fall back to the module defaults.

    Raises:
        ValueError: If a numeric option cannot be parsed or a value is out of
            range.
    """

    try:
        top_products = parser.getint("Report", "TopProducts", fallback=DEFAULT_TOP_PRODUCTS)
        page_break_ratio = parser.getfloat("Layout", "PageBreakRatio", fallback=DEFAULT_PAGE_BREAK_RATIO)
    except ValueError as exc:
        raise ValueError(f"Invalid numeric configuration entry: {exc}") from exc

    return ReportSettings(
        domain_tag=parser.get("Report", "DomainTag", fallback=DEFAULT_DOMAIN_TAG),
        currency_symbol=parser.get("Report", "CurrencySymbol", fallback=DEFAULT_CURRENCY_SYMBOL),
        date_format=parser.get("Report", "DateFormat", fallback=DEFAULT_DATE_FORMAT),
        thousands_separator=parser.get(
            "Report", "ThousandsSeparator", fallback=DEFAULT_THOUSANDS_SEPARATOR
        ),
        top_products=top_products,
        page_break_ratio=page_break_ratio,
        log_dir=_optional_path(parser.get("Logging", "Directory", fallback="")),
    )


def load_settings(config_path: Optional[Path] = None) -> ReportSettings:
    """Find, read and parse the configuration in one call.

    When the file names a ``[Logging] Directory``, the package log file is
    moved there before returning.
    """

    located = find_config_file(config_path)
    settings = parse_settings(read_config(located))
    if settings.log_dir is not None:
        configure_log_file(settings.log_dir)
    log.info("Loaded report settings from '%s'", located)
    return settings
