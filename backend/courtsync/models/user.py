from typing import Any, Literal, Optional

from courtsync.models.base import RawDocument


class RawUser(RawDocument):
    kind: Literal["users"] = "users"

    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    join_date: Any = None
    created_at: Any = None
