"""Filtering and normalization of mobile-money transactions."""

import json
import logging
from collections.abc import Iterable
from decimal import Decimal
from pathlib import Path
from typing import Any

from momo_press.errors import InvalidPeriodError, MalformedRecordError, SourceError
from momo_press.models import NormalizationRules, NormalizedTransaction, RawTransaction
from momo_press.rules import (
    INCOMING_PREFIXES,
    INCOMING_SUBSTRINGS,
    OUTGOING_PREFIXES,
    STATUS_COMPLETED_LABEL,
    STATUS_CONFIRMED,
    STATUS_ICON_FAILED,
    STATUS_ICON_OK,
    default_rules,
)
from momo_press.utils import build_transaction_id, parse_period, read_json_file, split_date_time

logger = logging.getLogger(__name__)


def validate_period(year: Any, month: Any) -> tuple[int, int]:
    """
    Check a year/month filter before normalizing.

    Args:
        year: Requested year (must be a non-zero integer)
        month: Requested month (1-12)

    Returns:
        (year, month) as integers

    Raises:
        InvalidPeriodError: If either value is missing or out of range
    """
    try:
        year = int(year)
        month = int(month)
    except (TypeError, ValueError) as e:
        raise InvalidPeriodError("Invalid year or month") from e

    if not year or not 1 <= month <= 12:
        raise InvalidPeriodError("Invalid year or month")
    return year, month


def infer_amount(
    amount: Decimal,
    message_text: str,
    category: str,
    name: str,
    rules: NormalizationRules,
) -> Decimal:
    """
    Re-derive the sign of an amount.

    Message text wins when it carries a signal; otherwise the category and
    the counterparty name rules decide. Anything left over is income.
    """
    magnitude = abs(amount)
    message = message_text.lower()

    if message.startswith(INCOMING_PREFIXES) or any(s in message for s in INCOMING_SUBSTRINGS):
        return magnitude
    if message.startswith(OUTGOING_PREFIXES):
        return -magnitude
    if rules.is_outgoing_category(category) or rules.is_outgoing_name(name):
        return -magnitude
    return magnitude


def normalize_record(
    tx: RawTransaction,
    rules: NormalizationRules,
    map_categories: bool = True,
) -> NormalizedTransaction:
    """Normalize a single raw transaction."""
    date_part, time_part = split_date_time(tx.date_time)

    participant = tx.participant
    name = participant.name
    if rules.bank_transfer_pattern.search(name):
        name = rules.bank_transfer_label

    icon: str | None
    if map_categories:
        category, icon = rules.category_for(tx.transaction_type)
    else:
        category, icon = tx.transaction_type, None

    if tx.status.lower() == STATUS_CONFIRMED:
        status, status_icon = STATUS_COMPLETED_LABEL, STATUS_ICON_OK
    else:
        status, status_icon = tx.status, STATUS_ICON_FAILED

    return NormalizedTransaction(
        id=build_transaction_id(date_part, tx.transaction_id),
        name=name,
        phone=participant.phone,
        amount=infer_amount(tx.amount, tx.message_text, category, name, rules),
        category=category,
        icon=icon,
        status_icon=status_icon,
        status=status,
        date=date_part,
        time=time_part,
    )


def normalize(
    records: Iterable[RawTransaction | dict[str, Any]],
    filter_year: int,
    filter_month: int,
    rules: NormalizationRules | None = None,
    map_categories: bool = True,
) -> list[NormalizedTransaction]:
    """
    Filter transactions to one month and normalize them for display.

    Records whose DateTime cannot be parsed are dropped. Records missing a
    required field fail the whole call. Input order is preserved.

    Args:
        records: Raw transactions, or the dicts they are read from
        filter_year: Year to keep
        filter_month: Month to keep (1-12)
        rules: Category table, outgoing set and name rules (defaults if None)
        map_categories: Map TransactionType through the category table;
            when False the raw type is kept as category and icon is None

    Returns:
        List of NormalizedTransaction objects

    Raises:
        MalformedRecordError: If a record lacks a required field
    """
    if rules is None:
        rules = default_rules()

    normalized: list[NormalizedTransaction] = []
    for record in records:
        date_time = _date_time_of(record)

        period = parse_period(date_time)
        if period is None:
            logger.debug("Dropping transaction with unparseable DateTime %r", date_time)
            continue
        if period != (filter_year, filter_month):
            continue

        tx = record if isinstance(record, RawTransaction) else RawTransaction.from_dict(record)
        normalized.append(normalize_record(tx, rules, map_categories))

    return normalized


def _date_time_of(record: RawTransaction | dict[str, Any]) -> str:
    if isinstance(record, RawTransaction):
        return record.date_time
    if record.get("DateTime") is None:
        raise MalformedRecordError(
            f"Transaction {record.get('TransactionID', '?')} is missing required field(s): DateTime"
        )
    return str(record["DateTime"])


class TransactionNormalizer:
    """
    Loads a transaction export and writes the normalized artifact.

    Usage:
        normalizer = TransactionNormalizer()
        transactions = normalizer.process_file(Path("transactions.json"), 2025, 11)
        normalizer.write_json(transactions, Path("transactions.normalized.json"))
    """

    def __init__(
        self,
        rules: NormalizationRules | None = None,
        map_categories: bool = True,
    ) -> None:
        """
        Initialize normalizer.

        Args:
            rules: Normalization rules (built-in defaults if None)
            map_categories: Map TransactionType to display category and icon
        """
        self.rules = rules if rules is not None else default_rules()
        self.map_categories = map_categories

    def load(self, filepath: Path) -> list[dict[str, Any]]:
        """
        Read the raw export.

        Args:
            filepath: Path to a JSON file holding a list of records

        Returns:
            List of raw record dicts

        Raises:
            SourceError: If the file is unreadable or not a JSON list
        """
        try:
            data = read_json_file(filepath)
        except (OSError, ValueError) as e:
            raise SourceError(str(e)) from e

        if not isinstance(data, list):
            raise SourceError(f"Expected a list of transactions in {filepath}")

        logger.info("Loaded %d raw transactions from %s", len(data), filepath)
        return data

    def normalize(
        self,
        records: Iterable[RawTransaction | dict[str, Any]],
        year: int,
        month: int,
    ) -> list[NormalizedTransaction]:
        """Normalize records with this normalizer's rules."""
        return normalize(records, year, month, self.rules, self.map_categories)

    def process_file(self, filepath: Path, year: int, month: int) -> list[NormalizedTransaction]:
        """
        Load an export and normalize the requested month.

        Args:
            filepath: Path to the JSON export
            year: Year to keep
            month: Month to keep

        Returns:
            List of NormalizedTransaction objects
        """
        transactions = self.normalize(self.load(filepath), year, month)
        logger.info("Normalized %d transactions for %04d-%02d", len(transactions), year, month)
        return transactions

    @staticmethod
    def write_json(transactions: list[NormalizedTransaction], output_path: Path) -> None:
        """
        Write the normalized transactions as a flat JSON list.

        Args:
            transactions: List of transactions
            output_path: Output file path

        Raises:
            SourceError: If the file cannot be written
        """
        try:
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump([tx.to_dict() for tx in transactions], f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            raise SourceError(f"Could not write {output_path}: {e}") from e

        logger.info("Wrote %d transactions to %s", len(transactions), output_path)
