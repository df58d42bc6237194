"""Loading of account, transaction and budget records from backend JSON exports.

Files hold either a bare array of records or the API response envelope
``{"data": [...]}``.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Optional, TypeVar

from networth_reporter.models.account import Account
from networth_reporter.models.budget import Budget
from networth_reporter.models.transaction import Transaction
from networth_reporter.utils.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class LoadError(Exception):
    """Exception raised when an input file or record cannot be loaded."""

    def __init__(self, message: str, file_path: Optional[Path] = None):
        """Initialize LoadError.

        Args:
            message: Error message.
            file_path: Optional path to the file that failed to load.
        """
        self.file_path = file_path
        super().__init__(message)


def read_records(path: Path) -> list[dict[str, object]]:
    """Read the list of records from a JSON export.

    Args:
        path: Path to the JSON file.

    Returns:
        List of record dictionaries.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        LoadError: If the file isn't valid JSON or holds no record list.
    """
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            content = json.load(f)
        except json.JSONDecodeError as e:
            raise LoadError(f"Invalid JSON in {path.name}: {e}", path) from e

    if isinstance(content, dict):
        content = content.get("data")
    if content is None:
        return []
    if not isinstance(content, list):
        raise LoadError(
            f"{path.name} must contain a list of records, got {type(content).__name__}",
            path,
        )
    return content


def _load(
    path: Path,
    factory: Callable[[dict[str, object]], T],
    kind: str,
    strict: bool,
) -> list[T]:
    records = read_records(path)
    loaded: list[T] = []
    skipped = 0

    for index, record in enumerate(records):
        try:
            if not isinstance(record, dict):
                raise ValueError(f"expected an object, got {type(record).__name__}")
            loaded.append(factory(record))
        except KeyError as e:
            message = f"{path.name}: {kind} record {index} is missing field {e}"
            if strict:
                raise LoadError(message, path) from e
            logger.warning(message)
            skipped += 1
        except ValueError as e:
            message = f"{path.name}: {kind} record {index} is invalid: {e}"
            if strict:
                raise LoadError(message, path) from e
            logger.warning(message)
            skipped += 1

    logger.info(f"Loaded {len(loaded)} {kind} records from {path} ({skipped} skipped)")
    return loaded


def load_accounts(path: Path, strict: bool = False) -> list[Account]:
    """Load accounts from a JSON export.

    Args:
        path: Path to the accounts file.
        strict: If True, raise on the first malformed record instead of
            skipping it.

    Returns:
        List of Account objects.

    Raises:
        LoadError: On unreadable files, or malformed records in strict mode.
    """
    return _load(path, Account.from_dict, "account", strict)


def load_transactions(path: Path, strict: bool = False) -> list[Transaction]:
    """Load transactions from a JSON export.

    Args:
        path: Path to the transactions file.
        strict: If True, raise on the first malformed record instead of
            skipping it.

    Returns:
        List of Transaction objects.

    Raises:
        LoadError: On unreadable files, or malformed records in strict mode.
    """
    return _load(path, Transaction.from_dict, "transaction", strict)


def load_budgets(path: Path, strict: bool = False) -> list[Budget]:
    """Load one-off and recurring budgets from a JSON export.

    Args:
        path: Path to the budgets file.
        strict: If True, raise on the first malformed record instead of
            skipping it.

    Returns:
        List of Budget objects.

    Raises:
        LoadError: On unreadable files, or malformed records in strict mode.
    """
    return _load(path, Budget.from_dict, "budget", strict)
