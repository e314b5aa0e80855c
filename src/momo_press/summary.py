"""Aggregates over normalized transactions for the history, home and spending views."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from momo_press.models import NormalizedTransaction

# Home screen chart buckets: substring of lowercase category -> bucket
HOME_BUCKETS = (
    ("transfer", "Transfers"),
    ("airtime", "Airtime"),
    ("merchant", "Merchants"),
    ("utility", "Utilities"),
)

OTHERS = "Others"


@dataclass(frozen=True)
class Totals:
    """Money in and out over a set of transactions."""

    sent: Decimal
    received: Decimal
    sent_count: int
    received_count: int

    @property
    def balance(self) -> Decimal:
        """Net movement (received minus sent)."""
        return self.received - self.sent


def search(transactions: list[NormalizedTransaction], text: str) -> list[NormalizedTransaction]:
    """
    Filter transactions by free text.

    Matches the name or category case-insensitively, or the phone number
    as a plain substring. Blank text returns everything.
    """
    if not text.strip():
        return list(transactions)

    needle = text.lower()
    return [
        tx
        for tx in transactions
        if needle in tx.name.lower() or needle in tx.phone or needle in tx.category.lower()
    ]


def totals(transactions: Iterable[NormalizedTransaction]) -> Totals:
    """Sum received and sent amounts."""
    sent = Decimal("0")
    received = Decimal("0")
    sent_count = 0
    received_count = 0

    for tx in transactions:
        if tx.is_income:
            received += tx.amount
            received_count += 1
        else:
            sent += abs(tx.amount)
            if tx.is_expense:
                sent_count += 1

    return Totals(sent=sent, received=received, sent_count=sent_count, received_count=received_count)


def spending_by_category(
    transactions: Iterable[NormalizedTransaction],
    categories: Iterable[str],
) -> dict[str, Decimal]:
    """
    Break outgoing spend down by category.

    Args:
        transactions: Normalized transactions
        categories: Categories to report; anything else lands in "Others"

    Returns:
        Mapping of category to total spent (all requested keys present)
    """
    sums: dict[str, Decimal] = {cat: Decimal("0") for cat in categories}
    by_lower = {cat.lower(): cat for cat in sums}

    for tx in transactions:
        if not tx.is_expense:
            continue
        key = by_lower.get(tx.category.lower(), OTHERS)
        sums[key] = sums.get(key, Decimal("0")) + abs(tx.amount)

    return sums


def home_breakdown(transactions: Iterable[NormalizedTransaction]) -> dict[str, Decimal]:
    """Bucket absolute amounts into the home screen chart categories."""
    sums = {bucket: Decimal("0") for _, bucket in HOME_BUCKETS}

    for tx in transactions:
        category = tx.category.lower()
        for needle, bucket in HOME_BUCKETS:
            if needle in category:
                sums[bucket] += abs(tx.amount)
                break

    return sums


def recent_total(
    transactions: Iterable[NormalizedTransaction],
    today: date,
    days: int = 7,
) -> Decimal:
    """Signed sum of transactions dated within the last ``days`` days."""
    start = today - timedelta(days=days)
    total = Decimal("0")

    for tx in transactions:
        try:
            tx_date = date.fromisoformat(tx.date)
        except ValueError:
            continue
        if start <= tx_date <= today:
            total += tx.amount

    return total
