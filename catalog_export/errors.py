"""Error taxonomy for the export engine.

All errors derive from ``RuntimeError`` so callers that only guard the
top-level write with ``except RuntimeError`` keep working.
"""

from __future__ import annotations

from typing import Optional


class ExportError(RuntimeError):
    """Base class for every failure raised by an export call."""


class ConfigurationError(ExportError):
    """Descriptor lists, domains or settings are inconsistent.

    Raised before any row is written.
    """


class AccessorFault(ExportError):
    """A field accessor failed for one record; the whole export is aborted."""

    def __init__(
        self,
        field: str,
        record_index: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        self.field = field
        self.record_index = record_index
        where = f" on record #{record_index}" if record_index is not None else ""
        detail = f": {cause!r}" if cause is not None else ""
        super().__init__(f"Accessor for field {field!r} failed{where}{detail}")


class DataIntegrityError(ExportError):
    """Input records violate a structural invariant (e.g. a cyclic tree)."""
