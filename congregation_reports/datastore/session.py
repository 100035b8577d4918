# congregation_reports/datastore/session.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Session:
    """
    Caller identity for one request.

    Built at the edge (FastAPI dependency, Streamlit run) and handed to every
    fetch; nothing in the package keeps a current-user global.
    """

    access_token: Optional[str] = None
    user_id: Optional[str] = None
    role: str = "anon"

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)


ANONYMOUS = Session()


def session_from_authorization(value: Optional[str], *, user_id: Optional[str] = None) -> Session:
    """Accepts 'Bearer <token>' or a bare token; empty -> anonymous."""
    parts = (value or "").split(None, 1)
    if not parts:
        return ANONYMOUS
    if parts[0].lower() == "bearer":
        token = parts[1].strip() if len(parts) > 1 else ""
    else:
        token = parts[0]
    if not token:
        return ANONYMOUS
    return Session(access_token=token, user_id=user_id, role="authenticated")
