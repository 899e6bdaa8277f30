# spendsense/core/context.py
from dataclasses import dataclass
from typing import Any, Dict, Optional

from supabase import Client, create_client

from spendsense.config import SUPABASE_KEY, SUPABASE_URL


def get_supabase_client() -> Client:
    """Returns a new Supabase client.

    Row level security on every table keys off the signed-in user's token, so
    each request gets its own client instead of sharing one across users.
    """
    return create_client(SUPABASE_URL, SUPABASE_KEY)


@dataclass(frozen=True)
class RequestContext:
    """Everything a store or pipeline call needs to know about the caller."""

    client: Client
    user_id: Optional[str] = None
    email: Optional[str] = None
    user_metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    @classmethod
    def anonymous(cls, client: Client) -> "RequestContext":
        return cls(client=client)

    @classmethod
    def from_user(cls, client: Client, user: Any) -> "RequestContext":
        """Builds a context from a Supabase auth User (or None for anonymous)."""
        if user is None:
            return cls.anonymous(client)
        created_at = getattr(user, "created_at", None)
        if created_at is not None and not isinstance(created_at, str):
            created_at = created_at.isoformat()
        return cls(
            client=client,
            user_id=user.id,
            email=getattr(user, "email", None),
            user_metadata=dict(getattr(user, "user_metadata", None) or {}),
            created_at=created_at,
        )
