"""
Magnolia Schedule - Flight schedules from the external scheduler.

This module provides:
- ScheduleSynchronizer: endpoint-variant fetching and student lookup
- FIELD_ALIASES and normalize_flight: upstream field normalization
- partition_flights: upcoming/past split
"""

from .normalize import (
    FIELD_ALIASES,
    resolve_field,
    normalize_flight,
    normalize_status,
    normalize_type,
    parse_flight_date,
    partition_flights,
    extract_records,
)
from .sync import ScheduleSynchronizer, PATH_PREFIXES, NOT_CONFIGURED

__all__ = [
    "FIELD_ALIASES",
    "resolve_field",
    "normalize_flight",
    "normalize_status",
    "normalize_type",
    "parse_flight_date",
    "partition_flights",
    "extract_records",
    "ScheduleSynchronizer",
    "PATH_PREFIXES",
    "NOT_CONFIGURED",
]
