"""Loyverse account registry.

Accounts are read from a JSON file. Two shapes are supported:

  [
    {"id": "main", "name": "Main Street", "apiToken": "...", "storeId": "..."}
  ]

and a mapping keyed by account id:

  {
    "main": {"name": "Main Street", "api_token": "...", "store_id": "*", "is_active": true}
  }

Both camelCase and snake_case keys are accepted. A store_id equal to
ALL_STORES ("*") queries every store under the token.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from takings_core.exceptions import ConfigError
from takings_core.receipts.extract import ALL_STORES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Account:
    """One Loyverse account/store the dashboard reports on.

    Attributes:
        id: Stable identifier, also the cache namespace.
        name: Display name.
        api_token: Loyverse access token.
        store_id: Store to query, or ALL_STORES.
        is_active: Whether this is the currently selected account.
    """

    id: str
    name: str
    api_token: str
    store_id: str
    is_active: bool = False

    @property
    def include_all_stores(self) -> bool:
        return self.store_id == ALL_STORES

    def __repr__(self) -> str:
        # keep tokens out of logs
        return (
            f"Account(id={self.id!r}, name={self.name!r}, store_id={self.store_id!r}, "
            f"is_active={self.is_active!r})"
        )


def _pick(entry: dict[str, Any], *names: str) -> Any:
    for n in names:
        if entry.get(n) not in (None, ""):
            return entry[n]
    return None


def _account_from_entry(entry: dict[str, Any], fallback_id: str | None = None) -> Account:
    account_id = _pick(entry, "id") or fallback_id
    token = _pick(entry, "apiToken", "api_token")
    store_id = _pick(entry, "storeId", "store_id")
    if not account_id:
        raise ConfigError(f"Account entry has no 'id': {sorted(entry)}")
    if not token:
        raise ConfigError(f"Account {account_id!r} has no API token")
    if not store_id:
        raise ConfigError(f"Account {account_id!r} has no store id")
    return Account(
        id=str(account_id),
        name=str(_pick(entry, "name") or account_id),
        api_token=str(token),
        store_id=str(store_id),
        is_active=bool(_pick(entry, "isActive", "is_active") or False),
    )


def load_accounts(path: Path) -> list[Account]:
    """Load accounts from a JSON file.

    Args:
        path: Path to accounts.json.

    Returns:
        Accounts in file order.

    Raises:
        ConfigError: If the file is missing, not valid JSON, or an entry
            lacks an id, token or store id.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read accounts file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Accounts file {path} is not valid JSON: {e}") from e

    accounts: list[Account] = []
    if isinstance(raw, list):
        for entry in raw:
            if not isinstance(entry, dict):
                raise ConfigError(f"Account entries must be objects, got {type(entry).__name__}")
            accounts.append(_account_from_entry(entry))
    elif isinstance(raw, dict):
        for key, entry in raw.items():
            if not isinstance(entry, dict):
                raise ConfigError(f"Account {key!r} must be an object")
            accounts.append(_account_from_entry(entry, fallback_id=str(key)))
    else:
        raise ConfigError("Accounts file must contain a JSON list or object")

    logger.debug("Loaded %d account(s) from %s", len(accounts), path)
    return accounts


def get_account(accounts: list[Account], key: str) -> Account:
    """Find an account by id, then by name.

    Raises:
        ConfigError: If no account matches.
    """
    for acc in accounts:
        if acc.id == key:
            return acc
    for acc in accounts:
        if acc.name == key:
            return acc
    raise ConfigError(f"Unknown account {key!r}. Known: {[a.id for a in accounts]}")


def get_active_account(accounts: list[Account]) -> Account:
    """Return the active account, or the first one if none is flagged.

    Raises:
        ConfigError: If there are no accounts.
    """
    if not accounts:
        raise ConfigError("No accounts configured")
    for acc in accounts:
        if acc.is_active:
            return acc
    return accounts[0]
