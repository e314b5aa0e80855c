"""Utility functions for momo-press."""

from momo_press.utils.parsing import (
    build_transaction_id,
    is_valid_phone,
    normalize_phone,
    parse_period,
    read_json_file,
    split_date_time,
)

__all__ = [
    "build_transaction_id",
    "is_valid_phone",
    "normalize_phone",
    "parse_period",
    "read_json_file",
    "split_date_time",
]
