"""
Purpose: Identity models shared by every role.
What it does:
Defines the Role enum and the immutable User record picked from the login roster.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Role(str, Enum):
    ADMIN = "ADMIN"
    DRIVER = "DRIVER"
    PASSENGER = "PASSENGER"


@dataclass(frozen=True)
class User:
    """
    A logged-in actor. Immutable once created.
    """
    id: str
    name: str
    role: Role
    phone_number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "phone_number": self.phone_number,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> User:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            role=Role(data["role"]),
            phone_number=data.get("phone_number"),
        )
