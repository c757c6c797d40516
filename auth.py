# app/auth.py
import logging

import streamlit as st

from backend import SupabaseClient, UserSession
from config import configure_logging, get_settings
from errors import AuthError, SalesHubError

logger = logging.getLogger(__name__)

SESSION_KEY = "session"


@st.cache_resource
def get_client() -> SupabaseClient:
    settings = get_settings()
    configure_logging(settings.log_level)
    return SupabaseClient(settings)


def current_session():
    return st.session_state.get(SESSION_KEY)


def set_login(session: UserSession):
    st.session_state[SESSION_KEY] = session


def sign_in(client: SupabaseClient, email: str, password: str) -> UserSession:
    session = client.sign_in((email or "").strip().lower(), password or "")
    set_login(session)
    return session


def sign_up(client: SupabaseClient, email: str, password: str, name: str):
    session = client.sign_up((email or "").strip().lower(), password or "", (name or "").strip())
    if session is not None:
        set_login(session)
    return session


def logout(client: SupabaseClient = None):
    session = st.session_state.pop(SESSION_KEY, None)
    # page-level state belongs to the signed-out user
    for key in ("entries_page", "dashboard_filter"):
        st.session_state.pop(key, None)
    if session is not None and client is not None:
        try:
            client.sign_out(session)
        except SalesHubError as e:
            logger.warning("Sign-out request failed: %s", e)


def require_login() -> UserSession:
    session = current_session()
    if not session:
        st.switch_page("Home.py")
    return session


def authed(client: SupabaseClient, fn, *args):
    """Run ``fn(client, session, *args)``, refreshing an expired session once.

    If the refresh is rejected too, the stored session is dropped and the
    user is sent back to the login page.
    """
    session = current_session()
    try:
        return fn(client, session, *args)
    except AuthError as e:
        if session is None:
            raise
        logger.info("Session for %s rejected (%s), refreshing", session.user_id, e)

    try:
        session = client.refresh(session)
    except SalesHubError as e:
        logger.warning("Could not refresh session: %s", e)
        logout()
        st.switch_page("Home.py")
        raise
    set_login(session)
    return fn(client, session, *args)
