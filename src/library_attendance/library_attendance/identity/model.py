from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Resolved caller of a request (what the bearer token carries)."""

    user_id: int
    role: Role
    name: str = ""
    email: str = ""

    def to_claims(self) -> dict:
        return {"id": self.user_id, "email": self.email, "name": self.name, "role": self.role.value}
