"""Configuration management."""

import inspect
import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .matching.pattern import DatePattern
from .storage.models import SortDirection

# Load .env file from current working directory
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "YYYY-MM-DD"
DEFAULT_SORT_ORDER = SortDirection.DESCENDING

ConfigListener = Callable[["Config"], Awaitable[None] | None]


@dataclass(frozen=True)
class Config:
    """Application configuration."""

    vault_path: Path
    date_format: str = DEFAULT_DATE_FORMAT
    sort_order: SortDirection = DEFAULT_SORT_ORDER
    extension: str = "md"

    @property
    def pattern(self) -> DatePattern:
        return DatePattern(self.date_format)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        A missing file means all defaults. Environment variables take
        precedence over YAML values:
        - VAULT_PATH: Path to the notes vault
        - DAILY_VIEWER_DATE_FORMAT: Date format of daily note filenames
        """
        path = Path(path)
        data: dict[str, Any] = {}
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}

        vault_path = os.environ.get("VAULT_PATH") or data.get("vault_path")
        date_format = os.environ.get("DAILY_VIEWER_DATE_FORMAT") or data.get(
            "date_format", DEFAULT_DATE_FORMAT
        )

        if not vault_path:
            raise ValueError(
                "vault_path must be set via VAULT_PATH environment variable "
                "or in config.yaml"
            )

        try:
            sort_order = SortDirection(data.get("sort_order", DEFAULT_SORT_ORDER.value))
        except ValueError:
            raise ValueError(
                f"sort_order must be one of: {', '.join(s.value for s in SortDirection)}"
            ) from None

        return cls(
            vault_path=Path(vault_path).expanduser(),
            date_format=str(date_format),
            sort_order=sort_order,
            extension=str(data.get("extension", "md")).lstrip("."),
        )

    def save_settings(self, path: str | Path) -> None:
        """Write the user-editable settings back to the YAML file.

        Other keys already in the file are kept as they are.
        """
        path = Path(path)
        data: dict[str, Any] = {}
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}

        data["date_format"] = self.date_format
        data["sort_order"] = self.sort_order.value

        with open(path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


class ConfigProvider:
    """Owns the current configuration and announces changes to listeners."""

    def __init__(self, config: Config, path: str | Path | None = None):
        self._config = config
        self.path = Path(path) if path else None
        self._listeners: list[ConfigListener] = []

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ConfigProvider":
        return cls(Config.from_yaml(path), path)

    @property
    def config(self) -> Config:
        return self._config

    def subscribe(self, listener: ConfigListener) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def update(
        self,
        date_format: str | None = None,
        sort_order: SortDirection | str | None = None,
    ) -> Config:
        """Change settings, persist them and notify listeners.

        Raises ValueError for a date format without year, month or day
        tokens or an unknown sort order; the current settings stay in place.
        """
        changes: dict[str, Any] = {}
        if date_format is not None:
            if not DatePattern(date_format).has_date_tokens:
                raise ValueError(f"Invalid date format: {date_format!r}")
            changes["date_format"] = date_format
        if sort_order is not None:
            changes["sort_order"] = SortDirection(sort_order)

        if not changes:
            return self._config

        self._config = replace(self._config, **changes)
        if self.path:
            self._config.save_settings(self.path)
        logger.info(
            f"Settings updated: date_format={self._config.date_format!r}, "
            f"sort_order={self._config.sort_order.value}"
        )

        for listener in list(self._listeners):
            result = listener(self._config)
            if inspect.isawaitable(result):
                await result
        return self._config
