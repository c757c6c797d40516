# app/backend.py
"""Thin wrapper over the Supabase SDK: auth calls and per-user table queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from postgrest.exceptions import APIError
from supabase import AuthError as SupabaseAuthError
from supabase import create_client

from config import Settings
from errors import AuthError, BackendError

logger = logging.getLogger(__name__)

# PostgREST codes for rejected / expired JWTs
JWT_ERROR_PREFIX = "PGRST30"
RANGE_NOT_SATISFIABLE = "PGRST103"


@dataclass(frozen=True)
class UserSession:
    """Signed-in user. Created on sign-in, replaced on refresh, dropped on sign-out."""

    user_id: str
    email: str
    access_token: str
    refresh_token: str = ""
    name: str = ""

    @classmethod
    def from_auth(cls, session, user=None) -> UserSession:
        user = user or session.user
        meta = getattr(user, "user_metadata", None) or {}
        return cls(
            user_id=str(user.id),
            email=user.email or "",
            access_token=session.access_token,
            refresh_token=session.refresh_token or "",
            name=meta.get("name") or "",
        )


def _auth_failure(e: SupabaseAuthError) -> AuthError:
    message = getattr(e, "message", None) or str(e)
    return AuthError(message, status_code=getattr(e, "status", None))


def _query_failure(e: APIError) -> BackendError:
    message = e.message or str(e)
    code = e.code or ""
    if code.startswith(JWT_ERROR_PREFIX) or "JWT" in message:
        return AuthError(message, code=code)
    return BackendError(message, code=code)


class SupabaseClient:
    def __init__(self, settings: Settings, factory=None):
        self.settings = settings
        self.factory = factory or create_client

    def connect(self):
        return self.factory(self.settings.supabase_url, self.settings.supabase_key)

    def _auth_call(self, fn, *args):
        try:
            return fn(*args)
        except SupabaseAuthError as e:
            logger.warning("Auth call %s rejected: %s", fn.__name__, e)
            raise _auth_failure(e) from e
        except httpx.HTTPError as e:
            logger.warning("Auth call %s failed: %s", fn.__name__, e)
            raise BackendError(f"Could not reach backend: {e}") from e

    # -------------------- Auth --------------------
    def sign_in(self, email: str, password: str) -> UserSession:
        c = self.connect()
        res = self._auth_call(c.auth.sign_in_with_password, {"email": email, "password": password})
        session = UserSession.from_auth(res.session, res.user)
        logger.info("Signed in user %s", session.user_id)
        return session

    def sign_up(self, email: str, password: str, name: str):
        """Create an account. Returns None when the backend wants email confirmation first."""
        c = self.connect()
        res = self._auth_call(
            c.auth.sign_up,
            {"email": email, "password": password, "options": {"data": {"name": name}}},
        )
        if res.session is None:
            logger.info("Sign-up for %s awaiting email confirmation", email)
            return None
        return UserSession.from_auth(res.session, res.user)

    def refresh(self, session: UserSession) -> UserSession:
        c = self.connect()
        res = self._auth_call(c.auth.refresh_session, session.refresh_token)
        if res.session is None:
            raise AuthError("Session expired, please sign in again.")
        logger.info("Refreshed session for user %s", session.user_id)
        return UserSession.from_auth(res.session, res.user)

    def sign_out(self, session: UserSession):
        c = self.connect()
        self._auth_call(c.auth.set_session, session.access_token, session.refresh_token)
        self._auth_call(c.auth.sign_out)
        logger.info("Signed out user %s", session.user_id)

    # -------------------- Tables --------------------
    def table(self, session: UserSession, name: str):
        # fresh client per call; the bearer token belongs to one user
        c = self.connect()
        c.postgrest.auth(session.access_token)
        return c.table(name)

    def execute(self, query):
        try:
            return query.execute()
        except APIError as e:
            logger.warning("Query failed: %s (%s)", e.message, e.code)
            raise _query_failure(e) from e
        except httpx.HTTPError as e:
            logger.warning("Query failed: %s", e)
            raise BackendError(f"Could not reach backend: {e}") from e
