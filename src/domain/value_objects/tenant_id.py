from __future__ import annotations

from uuid import UUID


def parse_tenant_id(value: str | UUID | None) -> UUID | None:
    if value is None or value == "":
        return None
    return value if isinstance(value, UUID) else UUID(str(value))
