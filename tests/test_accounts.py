"""Tests for the account registry."""

import json
from pathlib import Path

import pytest

from takings_core.accounts import get_account, get_active_account, load_accounts
from takings_core.exceptions import ConfigError
from takings_core.receipts.extract import ALL_STORES


def _write(tmp_path: Path, data: object) -> Path:
    path = tmp_path / "accounts.json"
    path.write_text(json.dumps(data))
    return path


def test_load_list_with_camel_case(tmp_path: Path) -> None:
    """A JSON list with camelCase keys loads in file order."""
    path = _write(
        tmp_path,
        [
            {"id": "a", "name": "Cafe A", "apiToken": "t1", "storeId": "s1"},
            {"id": "b", "name": "Group", "apiToken": "t2", "storeId": ALL_STORES, "isActive": True},
        ],
    )
    accounts = load_accounts(path)

    assert [a.id for a in accounts] == ["a", "b"]
    assert accounts[0].include_all_stores is False
    assert accounts[1].include_all_stores is True
    assert get_active_account(accounts).id == "b"


def test_load_mapping_with_snake_case(tmp_path: Path) -> None:
    """A mapping keyed by id with snake_case keys loads."""
    path = _write(tmp_path, {"main": {"api_token": "t", "store_id": "s"}})
    (acc,) = load_accounts(path)
    assert acc.id == "main"
    assert acc.name == "main"
    assert acc.is_active is False


def test_missing_token_is_config_error(tmp_path: Path) -> None:
    """An entry without a token is rejected."""
    path = _write(tmp_path, [{"id": "a", "storeId": "s"}])
    with pytest.raises(ConfigError, match="API token"):
        load_accounts(path)


def test_missing_file_is_config_error(tmp_path: Path) -> None:
    """A missing accounts file raises ConfigError."""
    with pytest.raises(ConfigError):
        load_accounts(tmp_path / "nope.json")


def test_invalid_json_is_config_error(tmp_path: Path) -> None:
    """Unparseable JSON raises ConfigError."""
    path = tmp_path / "accounts.json"
    path.write_text("[")
    with pytest.raises(ConfigError):
        load_accounts(path)


def test_get_account_by_id_or_name(tmp_path: Path) -> None:
    """Lookup matches id first, then name."""
    accounts = load_accounts(
        _write(tmp_path, [{"id": "a", "name": "Cafe A", "apiToken": "t", "storeId": "s"}])
    )
    assert get_account(accounts, "a").name == "Cafe A"
    assert get_account(accounts, "Cafe A").id == "a"
    with pytest.raises(ConfigError):
        get_account(accounts, "zzz")


def test_active_defaults_to_first_and_requires_accounts(tmp_path: Path) -> None:
    """Without an active flag the first account is used."""
    accounts = load_accounts(
        _write(tmp_path, [{"id": "x", "apiToken": "t", "storeId": "s"},
                          {"id": "y", "apiToken": "t", "storeId": "s"}])
    )
    assert get_active_account(accounts).id == "x"
    with pytest.raises(ConfigError):
        get_active_account([])


def test_repr_hides_token(tmp_path: Path) -> None:
    """The API token never appears in repr()."""
    (acc,) = load_accounts(_write(tmp_path, [{"id": "a", "apiToken": "secret", "storeId": "s"}]))
    assert "secret" not in repr(acc)
