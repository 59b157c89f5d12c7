from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .enums import Role
from .exceptions import AuthorizationError


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller, passed explicitly into services."""

    user_id: str
    role: Role
    employee_id: Optional[int] = None

    @property
    def is_admin_or_hr(self) -> bool:
        return self.role in {Role.ADMIN, Role.HR}

    def require_admin_or_hr(self) -> None:
        if not self.is_admin_or_hr:
            raise AuthorizationError("Admin or HR role required")

    def require_employee(self) -> int:
        if self.employee_id is None:
            raise AuthorizationError("No employee profile linked to this account")
        return int(self.employee_id)

    @classmethod
    def from_session(cls, session: Mapping[str, Any]) -> Optional["RequestContext"]:
        """Build a context from the Flask session set by the identity provider."""
        if "user_id" not in session:
            return None

        try:
            role = Role(session.get("role") or Role.EMPLOYEE.value)
            employee_id = session.get("employee_id")
            employee_id = int(employee_id) if employee_id is not None else None
        except (TypeError, ValueError):
            raise AuthorizationError("Unrecognised session identity")

        return cls(user_id=str(session["user_id"]), role=role, employee_id=employee_id)
