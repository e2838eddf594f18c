"""Configuration dataclass and YAML loading for the composer."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional
import yaml

from .errors import ConfigError
from .layout_engine import PageLayout


@dataclass
class ComposerConfig:
    """Page geometry and presentation settings. Lengths are millimetres."""

    page_width: float = 210.0
    page_height: float = 297.0
    margin: float = 15.0

    # Logo bounding box and the gap below it
    logo_max_width: float = 40.0
    logo_max_height: float = 15.0
    logo_gap: float = 5.0

    # Items table
    table_header_height: float = 8.0
    table_row_height: float = 7.0
    amount_column_width: float = 40.0
    cell_padding: float = 2.0

    # Text
    currency_symbol: str = "$"
    document_title: str = "RECEIPT"
    placeholder_number: str = "unknown"
    style: str = "default"

    # Batch rendering
    max_workers: int = 4

    @property
    def page_layout(self) -> PageLayout:
        return PageLayout(
            page_width=self.page_width,
            page_height=self.page_height,
            margin=self.margin,
        )

    def validate(self) -> None:
        """Raise ConfigError on wrongly typed values or geometry that cannot produce a page."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(f.default, str):
                if not isinstance(value, str):
                    raise ConfigError(f"{f.name} must be a string, got {value!r}")
            elif isinstance(f.default, int):
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigError(f"{f.name} must be an integer, got {value!r}")
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{f.name} must be a number, got {value!r}")

        positive = [
            "page_width", "page_height", "logo_max_width", "logo_max_height",
            "table_header_height", "table_row_height", "amount_column_width",
            "max_workers",
        ]
        for name in positive:
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.margin < 0 or self.logo_gap < 0 or self.cell_padding < 0:
            raise ConfigError("margin, logo_gap and cell_padding must not be negative")
        if self.page_height <= 2 * self.margin or self.page_width <= 2 * self.margin:
            raise ConfigError("margin leaves no printable area")
        if self.amount_column_width >= self.page_width - 2 * self.margin:
            raise ConfigError("amount_column_width leaves no room for the description column")
        printable = self.page_height - 2 * self.margin
        if self.table_header_height + self.table_row_height > printable:
            raise ConfigError("a table header plus one row must fit on a page")

    @classmethod
    def from_yaml(cls, path: Path) -> "ComposerConfig":
        """Load configuration from a YAML file."""
        with open(path, "r") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"{path}: invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a mapping at the top level")

        known = {f.name for f in fields(cls)}
        unknown = sorted(str(k) for k in set(data) - known)
        if unknown:
            raise ConfigError(f"{path}: unknown configuration keys: {', '.join(unknown)}")

        config = cls(**data)
        config.validate()
        return config

    def to_yaml(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[Path] = None) -> ComposerConfig:
    """Load config from path or return default config."""
    if path is None:
        return ComposerConfig()
    return ComposerConfig.from_yaml(path)
