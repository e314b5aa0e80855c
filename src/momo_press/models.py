"""Data models for mobile-money transactions."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from momo_press.errors import MalformedRecordError

REQUIRED_FIELDS = ("TransactionID", "DateTime", "Amount", "TransactionType", "Status")


@dataclass(frozen=True)
class Participant:
    """Counterparty of a transaction."""

    name: str = "Unknown"
    phone: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Participant":
        return cls(
            name=data.get("Name") or "Unknown",
            phone=data.get("PhoneNumber") or "",
        )


@dataclass(frozen=True)
class RawTransaction:
    """A ledger entry as exported by the mobile-money provider."""

    transaction_id: int | str
    date_time: str
    amount: Decimal
    transaction_type: str
    status: str
    message_text: str = ""
    participants: tuple[Participant, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawTransaction":
        """
        Build a RawTransaction from one record of the JSON export.

        Args:
            data: Record with PascalCase keys (TransactionID, DateTime, ...)

        Returns:
            RawTransaction

        Raises:
            MalformedRecordError: If a required field is missing or Amount
                is not a number
        """
        missing = [name for name in REQUIRED_FIELDS if data.get(name) is None]
        if missing:
            raise MalformedRecordError(
                f"Transaction {data.get('TransactionID', '?')} is missing "
                f"required field(s): {', '.join(missing)}"
            )

        try:
            amount = Decimal(str(data["Amount"]))
        except InvalidOperation as e:
            raise MalformedRecordError(
                f"Transaction {data['TransactionID']} has a non-numeric Amount: "
                f"{data['Amount']!r}"
            ) from e
        if not amount.is_finite():
            raise MalformedRecordError(
                f"Transaction {data['TransactionID']} has a non-finite Amount: "
                f"{data['Amount']!r}"
            )

        # Empty entries keep their position so index 0 stays the first participant
        participants = tuple(
            Participant.from_dict(p) if p else Participant()
            for p in data.get("Participants") or []
        )

        return cls(
            transaction_id=data["TransactionID"],
            date_time=str(data["DateTime"]),
            amount=amount,
            transaction_type=str(data["TransactionType"]),
            status=str(data["Status"]),
            message_text=data.get("MessageText") or "",
            participants=participants,
        )

    @property
    def participant(self) -> Participant:
        """First participant, or an Unknown placeholder."""
        if self.participants:
            return self.participants[0]
        return Participant()


@dataclass(frozen=True)
class NormalizedTransaction:
    """Display-ready transaction."""

    id: str
    name: str
    phone: str
    amount: Decimal
    category: str
    icon: str | None
    status_icon: str
    status: str
    date: str
    time: str

    @property
    def is_expense(self) -> bool:
        """Return True if money left the account."""
        return self.amount < 0

    @property
    def is_income(self) -> bool:
        """Return True if money came in."""
        return self.amount > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase mapping the UI renders."""
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "amount": _json_number(self.amount),
            "category": self.category,
            "icon": self.icon,
            "statusIcon": self.status_icon,
            "status": self.status,
            "date": self.date,
            "time": self.time,
        }


def _json_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True)
class NameRule:
    """Marks a transaction by its counterparty name.

    ``pattern`` is matched as a lowercase substring of the displayed name.
    """

    pattern: str
    effect: str = "outgoing"
    note: str = ""

    def __post_init__(self) -> None:
        if self.effect != "outgoing":
            raise ValueError(f"Unsupported name rule effect: {self.effect!r}")
        if not self.pattern.strip():
            raise ValueError("Name rule pattern must not be empty")

    def matches(self, name: str) -> bool:
        return self.pattern.lower() in name.lower()


@dataclass(frozen=True)
class NormalizationRules:
    """Lookup data driving category mapping and sign inference."""

    categories: dict[str, tuple[str, str]]
    outgoing_categories: frozenset[str]
    name_rules: tuple[NameRule, ...] = ()
    bank_transfer_pattern: re.Pattern[str] = re.compile(r"your money account at", re.IGNORECASE)
    bank_transfer_label: str = "Bank Transfer"
    fallback_category: tuple[str, str] = ("Unknown", "question")

    def category_for(self, transaction_type: str) -> tuple[str, str]:
        """Return (category, icon) for a raw TransactionType."""
        return self.categories.get(transaction_type.lower(), self.fallback_category)

    def is_outgoing_category(self, category: str) -> bool:
        return category.lower() in self.outgoing_categories

    def is_outgoing_name(self, name: str) -> bool:
        return any(rule.matches(name) for rule in self.name_rules)
