"""Parsing utilities for mobile-money exports."""

import json
import re
from pathlib import Path
from typing import Any

RWANDA_MTN_PATTERN = re.compile(r"^(\+?250|0)?(78|79)\d{7}$")


def split_date_time(date_time: str) -> tuple[str, str]:
    """
    Split a ``"YYYY-MM-DD HH:MM AM"`` string into date and time parts.

    The date is the first space-delimited token; the time is everything
    after it, single-spaced and trimmed.

    Args:
        date_time: DateTime value from the export

    Returns:
        (date, time) tuple; time is empty if there is none
    """
    tokens = date_time.split(" ")
    date_part = tokens[0]
    time_part = " ".join(t for t in tokens[1:] if t)
    return date_part, time_part.strip()


def parse_period(date_time: str) -> tuple[int, int] | None:
    """
    Extract (year, month) from a DateTime string.

    Leading zeros are tolerated ("2025-03" and "2025-3" both give month 3).

    Args:
        date_time: DateTime value from the export

    Returns:
        (year, month) if the date segment parses, None otherwise
    """
    date_part = split_date_time(date_time)[0]
    segments = date_part.split("-")
    if len(segments) < 2:
        return None

    try:
        return int(segments[0]), int(segments[1])
    except ValueError:
        return None


def build_transaction_id(date_part: str, transaction_id: int | str) -> str:
    """Build the display id: ``MPR`` + date digits + 4-digit padded id."""
    return "MPR" + date_part.replace("-", "") + str(transaction_id).rjust(4, "0")


def clean_phone(phone: str) -> str:
    """Remove spaces, dashes and parentheses from a phone number."""
    return re.sub(r"[\s\-()]", "", phone)


def is_valid_phone(phone: str) -> bool:
    """Check for a Rwandan MTN number (078/079...)."""
    return bool(RWANDA_MTN_PATTERN.match(clean_phone(phone)))


def normalize_phone(phone: str) -> str:
    """
    Normalize a Rwandan phone number to ``+250`` international form.

    Examples:
        0788123456    -> +250788123456
        250788123456  -> +250788123456
        788123456     -> +250788123456
    """
    phone = clean_phone(phone)
    if phone.startswith("+250"):
        return phone
    if phone.startswith("250"):
        return "+" + phone
    if phone.startswith("0"):
        return "+250" + phone[1:]
    return "+250" + phone


def read_json_file(filepath: Path) -> Any:
    """
    Read and decode a JSON file.

    Args:
        filepath: Path to the file

    Returns:
        Decoded JSON value

    Raises:
        ValueError: If the file cannot be read or is not valid JSON
    """
    if not filepath.exists():
        raise ValueError(f"File not found: {filepath}")

    encodings = ["utf-8-sig", "utf-8", "latin-1"]

    for encoding in encodings:
        try:
            with open(filepath, encoding=encoding) as f:
                content = f.read()
            break
        except UnicodeDecodeError:
            continue
    else:
        raise ValueError(f"Could not decode file {filepath} with any known encoding")

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {filepath}: {e}") from e
