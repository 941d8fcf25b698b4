from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"
    VIEWER = "VIEWER"

    def can_write(self) -> bool:
        return self in {Role.ADMIN, Role.USER}

    def spans_tenants(self) -> bool:
        return self is Role.ADMIN
