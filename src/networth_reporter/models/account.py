"""Account data model for net-worth reporting."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from networth_reporter.utils.date_utils import parse_datetime
from networth_reporter.utils.decimal_utils import to_decimal


class AccountType(Enum):
    """Type of financial account."""

    # Assets
    CHECKING = "checking"
    SAVINGS = "savings"
    CASH = "cash"
    INVESTMENT = "investment"
    PROPERTY = "property"
    OTHER_ASSET = "other_asset"

    # Liabilities
    CREDIT_CARD = "credit_card"
    HOME_LOAN = "home_loan"
    PERSONAL_LOAN = "personal_loan"
    CAR_LOAN = "car_loan"
    STUDENT_LOAN = "student_loan"
    LINE_OF_CREDIT = "line_of_credit"
    OTHER_LIABILITY = "other_liability"

    @property
    def is_liability(self) -> bool:
        """Whether a positive balance of this type decreases net worth."""
        return self in LIABILITY_TYPES


LIABILITY_TYPES = frozenset({
    AccountType.CREDIT_CARD,
    AccountType.HOME_LOAN,
    AccountType.PERSONAL_LOAN,
    AccountType.CAR_LOAN,
    AccountType.STUDENT_LOAN,
    AccountType.LINE_OF_CREDIT,
    AccountType.OTHER_LIABILITY,
})

ASSET_TYPES = frozenset(t for t in AccountType if t not in LIABILITY_TYPES)


@dataclass
class Account:
    """Represents a user's financial account.

    Attributes:
        id: Unique identifier for this account.
        name: Human-readable account name (e.g., "Main Checking").
        account_type: Type of account; decides asset vs. liability treatment.
        balance: Current balance. Authoritative as-of-now value; for
            liabilities this is the amount owed.
        created_at: When the account was created.
        institution: Name of the financial institution.
        account_number_masked: Last digits of the account number.
        currency: ISO currency code.
        is_active: False for soft-deleted accounts.
        opening_balance: Balance at creation, if known. Only used to
            reconcile the stored balance against transaction history.
    """

    id: str
    name: str
    account_type: AccountType
    balance: Decimal
    created_at: datetime

    institution: Optional[str] = None
    account_number_masked: Optional[str] = None
    currency: str = "USD"
    is_active: bool = True
    opening_balance: Optional[Decimal] = None

    @property
    def is_liability(self) -> bool:
        """Whether this account is liability-like."""
        return self.account_type.is_liability

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Account":
        """Create an Account from an API record.

        Accepts the backend's camelCase keys (``accountId``, ``createdAt``)
        as well as snake_case ones.

        Args:
            data: Dictionary containing account data.

        Returns:
            A new Account instance.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If the balance, creation date or active flag is malformed.
        """
        account_id = data.get("accountId", data.get("id"))
        if account_id is None:
            raise KeyError("accountId")
        if "balance" not in data:
            raise KeyError("balance")
        created_raw = data.get("createdAt", data.get("created_at"))
        if created_raw is None:
            raise KeyError("createdAt")

        type_str = str(data.get("type", "other_asset")).strip().lower()
        try:
            account_type = AccountType(type_str)
        except ValueError:
            account_type = AccountType.OTHER_ASSET

        opening_raw = data.get("openingBalance", data.get("opening_balance"))

        is_active = data.get("isActive", data.get("is_active", True))
        if not isinstance(is_active, bool):
            raise ValueError(f"isActive must be a boolean, got {is_active!r}")

        return cls(
            id=str(account_id),
            name=str(data.get("name") or account_id),
            account_type=account_type,
            balance=to_decimal(data["balance"]),
            created_at=parse_datetime(created_raw),
            institution=str(data["institution"]) if data.get("institution") else None,
            account_number_masked=(
                str(data["accountNumber"]) if data.get("accountNumber") else None
            ),
            currency=str(data.get("currency") or "USD"),
            is_active=is_active,
            opening_balance=to_decimal(opening_raw) if opening_raw is not None else None,
        )

    def __repr__(self) -> str:
        return f"Account(id={self.id!r}, name={self.name!r}, type={self.account_type.value})"
