"""Utility modules."""
from satprep.utils.json_utils import json_dump, json_load, load_json_column
from satprep.utils.time_utils import ensure_utc, parse_iso_timestamp, utc_now
from satprep.utils.validation import validate_id

__all__ = [
    "json_dump",
    "json_load",
    "load_json_column",
    "ensure_utc",
    "parse_iso_timestamp",
    "utc_now",
    "validate_id",
]
