"""Value coercion.

Accessors return one of: None, bool, int, Decimal/float, str, date/datetime.
Enumerations, UUIDs and other scalars are normalized here so the writers
never see anything else.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Union
from uuid import UUID

CellValue = Union[None, bool, int, float, Decimal, str, datetime, date]


def to_cell_value(value: Any) -> CellValue:
    """Coerce an accessor result to a typed spreadsheet cell value.

    Spreadsheet date-times carry no zone: aware values are converted to UTC
    and stripped of tzinfo.
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        return to_cell_value(value.value)
    if isinstance(value, (bool, int, float, Decimal, str)):
        return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return value
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return str(value)


def to_text(value: Any) -> str:
    """Render a value as markup element text.

    Booleans use ``True``/``False`` and absent values render as an empty
    string, matching what the import side of the catalog expects.
    """
    if value is None:
        return ""
    if isinstance(value, Enum):
        return to_text(value.value)
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)
