# =============================================================================
# taskhub_core/data/__init__.py
# Remote data access: Supabase client, collection gateway, timestamps
# =============================================================================

from .timestamps import (
    FormattedDate,
    InstantDate,
    DateValue,
    parse_date_value,
    to_instant,
    format_task_date,
    format_display_date,
    utc_now,
)
from .gateway import (
    CollectionGateway,
    WriteOutcome,
    WriteStatus,
    is_permission_denied,
)
from .schema import get_schema_sql

__all__ = [
    "FormattedDate",
    "InstantDate",
    "DateValue",
    "parse_date_value",
    "to_instant",
    "format_task_date",
    "format_display_date",
    "utc_now",
    "CollectionGateway",
    "WriteOutcome",
    "WriteStatus",
    "is_permission_denied",
    "get_schema_sql",
]
