"""Budget data model."""

from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal
from functools import cached_property
from typing import Optional

from dateutil.rrule import rrule, rruleset, rrulestr

from networth_reporter.utils.date_utils import parse_datetime
from networth_reporter.utils.decimal_utils import to_decimal


def parse_recurrence(rule: str, start: datetime) -> rrule | rruleset:
    """Parse an RFC 5545 recurrence rule anchored at a budget's start day.

    A DTSTART inside the rule takes precedence over ``start``. Time zones
    are dropped so occurrences compare with naive UTC datetimes.

    Args:
        rule: Rule text, e.g. ``"FREQ=MONTHLY;BYMONTHDAY=1"``.
        start: Budget start; only its calendar day is used.

    Returns:
        The parsed rule.

    Raises:
        ValueError: If the rule cannot be parsed.
    """
    dtstart = datetime.combine(start.date(), time.min)
    try:
        return rrulestr(rule, dtstart=dtstart, ignoretz=True)
    except (ValueError, KeyError, TypeError) as e:
        raise ValueError(f"Invalid recurrence rule '{rule}': {e}") from None


@dataclass
class Budget:
    """A spending budget for one category, or for all spending.

    A budget without a recurrence rule applies to the month its start date
    falls in. A recurring budget applies to every month in which its rule
    has an occurrence between ``start_date`` and ``end_date``.

    Attributes:
        id: Unique identifier.
        name: Display name.
        amount: Budgeted amount (positive).
        start_date: First day the budget applies.
        category_id: Category the budget limits; None for overall budgets.
        is_overall: True for a budget on total spending.
        end_date: Last day a recurring budget applies, if any.
        recurrence_rule: RRULE text for recurring budgets.
    """

    id: str
    name: str
    amount: Decimal
    start_date: datetime
    category_id: Optional[str] = None
    is_overall: bool = False
    end_date: Optional[datetime] = None
    recurrence_rule: Optional[str] = None

    @property
    def is_recurring(self) -> bool:
        return self.recurrence_rule is not None

    @cached_property
    def schedule(self) -> rrule | rruleset | None:
        """Parsed recurrence rule, or None for one-off budgets."""
        if self.recurrence_rule is None:
            return None
        return parse_recurrence(self.recurrence_rule, self.start_date)

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Budget":
        """Create a Budget from an API record.

        Args:
            data: Dictionary containing budget data (camelCase or snake_case).

        Returns:
            A new Budget instance.

        Raises:
            KeyError: If the amount or start date is missing.
            ValueError: If a field is malformed or the rule does not parse.
        """
        if "amount" not in data:
            raise KeyError("amount")
        start_raw = data.get("startDate", data.get("start_date"))
        if start_raw is None:
            raise KeyError("startDate")

        budget_id = str(data.get("budgetId", data.get("id", "")))
        category = data.get("categoryId", data.get("category_id"))
        end_raw = data.get("endDate", data.get("end_date"))
        rule = data.get("recurrenceRule", data.get("recurrence_rule"))

        is_overall = data.get("isOverall", data.get("is_overall", False))
        if is_overall is None:
            is_overall = False
        if not isinstance(is_overall, bool):
            raise ValueError(f"isOverall must be a boolean, got {is_overall!r}")

        amount = to_decimal(data["amount"])
        if amount < 0:
            raise ValueError(f"Budget amount must not be negative, got {amount}")

        budget = cls(
            id=budget_id,
            name=str(data.get("name") or category or budget_id),
            amount=amount,
            start_date=parse_datetime(start_raw),
            category_id=str(category) if category else None,
            is_overall=is_overall,
            end_date=parse_datetime(end_raw) if end_raw is not None else None,
            recurrence_rule=str(rule).strip() or None if rule else None,
        )
        if budget.recurrence_rule is not None:
            # Fail this record rather than the whole report
            parse_recurrence(budget.recurrence_rule, budget.start_date)
        return budget
