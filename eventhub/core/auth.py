"""Caller identity as supplied by the authentication boundary.

The gateway in front of this service authenticates the request and forwards the
resolved identity in headers; nothing here verifies credentials.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException


class UserStatus(str, enum.Enum):
    ADMIN = "ADMIN"
    USER = "USER"
    VERIFIED_USER = "VERIFIED_USER"


@dataclass(frozen=True)
class Caller:
    id: int
    email: Optional[str] = None
    status: UserStatus = UserStatus.USER

    @property
    def is_admin(self) -> bool:
        return self.status == UserStatus.ADMIN


def get_optional_caller(
    x_user_id: Optional[int] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
    x_user_status: UserStatus = Header(default=UserStatus.USER),
) -> Optional[Caller]:
    if x_user_id is None:
        return None
    return Caller(id=x_user_id, email=x_user_email, status=x_user_status)


def get_caller(
    x_user_id: Optional[int] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
    x_user_status: UserStatus = Header(default=UserStatus.USER),
) -> Caller:
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return Caller(id=x_user_id, email=x_user_email, status=x_user_status)
