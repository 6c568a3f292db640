"""ServiceResult: outcome of an operation that must not fail as a whole.

Tenant seeding never raises. It reports what it wrote as counts in ``data``
and what it skipped as one ``warnings`` entry per item. Read operations
return plain values and raise instead.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceResult(BaseModel):
    """Outcome of a best-effort service operation.

    Attributes:
        ok: Whether the operation ran to completion.
        op: Name of the operation (e.g. ``"import_claims"``).
        data: Counters and flags specific to the operation.
        warnings: One message per item that was skipped or adjusted.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)

    def count(self, key: str) -> int:
        """Integer counter *key* from ``data``, 0 when absent."""
        return int(self.data.get(key, 0))

    @property
    def partial(self) -> bool:
        """True when at least one item was skipped or adjusted."""
        return bool(self.warnings)
