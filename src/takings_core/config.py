"""Unified configuration for Takings Core.

This module provides the filesystem layout (DataPaths) and the Loyverse
connection settings (LoyverseSettings) used across the package.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from takings_core.exceptions import ConfigError

DEFAULT_BASE_URL = "https://api.loyverse.com/v1.0"
DEFAULT_TIMEOUT = 60.0
DEFAULT_DAYS_TO_LOAD = 31


@dataclass
class DataPaths:
    """All filesystem paths used by Takings Core.

    Attributes:
        data_root: Root directory for cached documents and exports.
        accounts_json: Path to the accounts configuration JSON file.

    Directory Structure:
        data_root/
        ├── cache/      # persistent cache tier, one folder per account
        └── exports/    # CSV exports written by the CLI
    """

    data_root: Path
    accounts_json: Path

    @classmethod
    def from_root(
        cls,
        data_root: str | Path,
        accounts_json: str | Path,
    ) -> DataPaths:
        """Create DataPaths from root directory and accounts file.

        Args:
            data_root: Root directory for Takings Core data.
            accounts_json: Path to accounts.json configuration.

        Returns:
            DataPaths instance.

        Examples:
            >>> paths = DataPaths.from_root("data", "utils/accounts.json")
            >>> paths.cache_dir
            PosixPath('data/cache')
        """
        if isinstance(data_root, str):
            data_root = Path(data_root)
        if isinstance(accounts_json, str):
            accounts_json = Path(accounts_json)

        return cls(data_root=data_root, accounts_json=accounts_json)

    @property
    def cache_dir(self) -> Path:
        """Persistent cache tier (JSON documents)."""
        return self.data_root / "cache"

    @property
    def exports_dir(self) -> Path:
        """CSV exports."""
        return self.data_root / "exports"

    def ensure_dirs(self) -> None:
        """Create all directories in the data structure."""
        for path in [self.cache_dir, self.exports_dir]:
            path.mkdir(parents=True, exist_ok=True)


@dataclass
class LoyverseSettings:
    """Connection settings for the Loyverse API.

    Attributes:
        api_token: Loyverse personal access token.
        store_id: Store to query, or the all-stores sentinel.
        base_url: API root, without trailing slash.
        timeout: Per-request timeout in seconds.
        days_to_load: Default size of the date window in days.
    """

    api_token: str | None
    store_id: str | None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    days_to_load: int = DEFAULT_DAYS_TO_LOAD

    @classmethod
    def from_env(cls) -> LoyverseSettings:
        """Build settings from LOYVERSE_* environment variables.

        Environment:
            LOYVERSE_API_TOKEN: access token (required before fetching).
            LOYVERSE_LOCATION_ID: store identifier (required before fetching).
            LOYVERSE_BASE: API root. Defaults to DEFAULT_BASE_URL.
            LOYVERSE_TIMEOUT: seconds. Defaults to 60.
            LOYVERSE_DAYS: default window size. Defaults to 31.

        Raises:
            ConfigError: If a numeric variable cannot be parsed.
        """
        try:
            timeout = float(os.environ.get("LOYVERSE_TIMEOUT", DEFAULT_TIMEOUT))
            days = int(os.environ.get("LOYVERSE_DAYS", DEFAULT_DAYS_TO_LOAD))
        except ValueError as e:
            raise ConfigError(f"Invalid numeric LOYVERSE_* setting: {e}") from e

        return cls(
            api_token=os.environ.get("LOYVERSE_API_TOKEN") or None,
            store_id=os.environ.get("LOYVERSE_LOCATION_ID") or None,
            base_url=(os.environ.get("LOYVERSE_BASE") or DEFAULT_BASE_URL).rstrip("/"),
            timeout=timeout,
            days_to_load=days,
        )

    def validate(self) -> None:
        """Fail before any network activity if credentials are missing.

        Raises:
            ConfigError: If api_token or store_id is missing.
        """
        if not self.api_token:
            raise ConfigError("LOYVERSE_API_TOKEN is not set")
        if not self.store_id:
            raise ConfigError("LOYVERSE_LOCATION_ID is not set")
