"""Transaction data model."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from networth_reporter.utils.date_utils import parse_datetime
from networth_reporter.utils.decimal_utils import to_decimal


TRANSFER_SOURCE = "account_transfer"


class TransactionType(Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Transaction:
    """An immutable record of money moving in or out of an account.

    Attributes:
        id: Unique identifier.
        account_id: The account this transaction belongs to.
        amount: Positive magnitude of the movement.
        transaction_type: Income or expense.
        date: When the transaction occurred.
        category_id: Optional category reference.
        notes: Optional free-text notes.
        source: How the transaction was created; ``"account_transfer"`` marks
            one leg of a transfer between the user's own accounts.
    """

    id: str
    account_id: str
    amount: Decimal
    transaction_type: TransactionType
    date: datetime
    category_id: Optional[str] = None
    notes: Optional[str] = None
    source: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.transaction_type is TransactionType.INCOME

    @property
    def is_transfer(self) -> bool:
        return self.source == TRANSFER_SOURCE

    def balance_effect(self, is_liability: bool) -> Decimal:
        """Change this transaction made to its account's balance.

        On asset accounts income adds and expense subtracts. On liability
        accounts, where the balance is the amount owed, the signs are
        mirrored: a payment (income) reduces the debt and a new charge
        (expense) increases it.

        Args:
            is_liability: Whether the owning account is liability-like.

        Returns:
            Signed change to the stored balance.
        """
        effect = self.amount if self.is_income else -self.amount
        return -effect if is_liability else effect

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Transaction":
        """Create a Transaction from an API record.

        Negative amounts are normalized to their magnitude; the direction
        comes from ``type`` alone.

        Args:
            data: Dictionary containing transaction data.

        Returns:
            A new Transaction instance.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If the amount, date or type is malformed.
        """
        for key in ("accountId", "amount", "type", "date"):
            if key not in data and _snake(key) not in data:
                raise KeyError(key)

        transaction_id = data.get("transactionId", data.get("id", ""))
        category = data.get("categoryId", data.get("category_id"))

        return cls(
            id=str(transaction_id),
            account_id=str(data.get("accountId", data.get("account_id"))),
            amount=abs(to_decimal(data.get("amount"))),
            transaction_type=TransactionType(str(data["type"]).strip().lower()),
            date=parse_datetime(data["date"]),
            category_id=str(category) if category else None,
            notes=str(data["notes"]) if data.get("notes") else None,
            source=str(data["source"]) if data.get("source") else None,
        )


def _snake(key: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in key)
