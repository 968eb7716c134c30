"""
Authentication Service - Supabase Auth
Sign-up, sign-in and sign-out against the hosted identity provider.

The signed-in user is kept in st.session_state so every page of the app
sees the same session. Each browser session gets its own Supabase client,
and the provider tokens are mirrored into browser cookies so a page reload
can restore the session. Tests pass plain dicts as session_state and
cookies, and a mock client.
"""

import os
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, MutableMapping, Optional, Tuple

import streamlit as st
from dotenv import load_dotenv
from supabase import create_client, Client

from report_wizard import User

load_dotenv()

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "auth_user"
SESSION_CLIENT_KEY = "auth_client"
PENDING_COOKIES_KEY = "auth_pending_cookies"
RESTORE_ATTEMPTED_KEY = "auth_restore_attempted"

ACCESS_TOKEN_COOKIE = "dentist_calc_access_token"
REFRESH_TOKEN_COOKIE = "dentist_calc_refresh_token"
COOKIE_MAX_AGE = 60 * 60 * 24 * 30  # 30 days

MIN_PASSWORD_LENGTH = 6

# ============================================
# SUPABASE CLIENT - ONE PER BROWSER SESSION
# ============================================


def get_supabase_credentials() -> Tuple[Optional[str], Optional[str]]:
    """URL and anon key from the environment, falling back to st.secrets."""
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_ANON_KEY")
    if url and key:
        return url, key

    try:
        return st.secrets["supabase"]["url"], st.secrets["supabase"]["key"]
    except Exception as e:
        logger.debug(f"No Supabase secrets available ({type(e).__name__})")
        return None, None


def get_supabase_client(session_state: MutableMapping) -> Optional[Client]:
    """
    Return the Supabase client of this browser session, or None when not
    configured.

    The client's auth object holds the signed-in session, so it is never
    shared between browser sessions.
    """
    client = session_state.get(SESSION_CLIENT_KEY)
    if client is not None:
        return client

    url, key = get_supabase_credentials()
    if not url or not key:
        return None

    client = create_client(url, key)
    session_state[SESSION_CLIENT_KEY] = client
    return client


@dataclass
class AuthResult:
    """Result of a sign-up or sign-in attempt."""
    success: bool
    user: Optional[User] = None
    error_message: Optional[str] = None
    needs_confirmation: bool = False


def _to_user(auth_user: Any) -> Optional[User]:
    if auth_user is None:
        return None
    return User(id=str(auth_user.id), email=auth_user.email or "")


class AuthService:
    """
    Identity provider wrapper.

    Usage:
        auth = AuthService()
        result = auth.sign_in("dentista@example.com", "segredo")
        user = auth.get_current_user()
    """

    def __init__(self, client: Optional[Client] = None,
                 session_state: Optional[MutableMapping] = None,
                 cookies: Optional[Mapping[str, str]] = None):
        self._client = client
        self.session_state = session_state if session_state is not None else st.session_state
        self._cookies = cookies

    @property
    def client(self) -> Optional[Client]:
        if self._client is None:
            self._client = get_supabase_client(self.session_state)
        return self._client

    @property
    def cookies(self) -> Mapping[str, str]:
        """Cookies sent by the browser when this session connected."""
        if self._cookies is None:
            return st.context.cookies
        return self._cookies

    def is_configured(self) -> Tuple[bool, str]:
        if self.client is None:
            return False, "SUPABASE_URL / SUPABASE_ANON_KEY not set"
        return True, ""

    def _queue_cookies(self, values: Dict[str, Optional[str]]) -> None:
        pending = self.session_state.get(PENDING_COOKIES_KEY) or {}
        pending.update(values)
        self.session_state[PENDING_COOKIES_KEY] = pending

    def _remember(self, user: User, session: Any) -> None:
        self.session_state[SESSION_USER_KEY] = {"id": user.id, "email": user.email}
        if session is not None:
            self._queue_cookies({
                ACCESS_TOKEN_COOKIE: session.access_token,
                REFRESH_TOKEN_COOKIE: session.refresh_token,
            })

    def _forget(self) -> None:
        if SESSION_USER_KEY in self.session_state:
            del self.session_state[SESSION_USER_KEY]
        # The cookies read at connect time are stale from here on
        self.session_state[RESTORE_ATTEMPTED_KEY] = True
        self._queue_cookies({ACCESS_TOKEN_COOKIE: None, REFRESH_TOKEN_COOKIE: None})

    def pending_cookie_script(self) -> Optional[str]:
        """
        Script that writes the queued token cookies in the browser, or None.

        Empties the queue; the caller renders the script once with
        streamlit.components.v1.html(script, height=0).
        """
        pending = self.session_state.get(PENDING_COOKIES_KEY)
        if not pending:
            return None
        del self.session_state[PENDING_COOKIES_KEY]

        lines = []
        for name, value in pending.items():
            if value is None:
                cookie = f"{name}=; path=/; max-age=0; SameSite=Strict"
            else:
                cookie = f"{name}={value}; path=/; max-age={COOKIE_MAX_AGE}; SameSite=Strict"
            lines.append(f"doc.cookie = {json.dumps(cookie)};")
        return "<script>\nconst doc = window.parent.document;\n" + "\n".join(lines) + "\n</script>"

    @staticmethod
    def _check_credentials(email: str, password: str) -> Optional[str]:
        if not email or not email.strip() or not password:
            return "Preencha email e senha!"
        return None

    def sign_up(self, email: str, password: str) -> AuthResult:
        """
        Create an account.

        When the project requires email confirmation no session is returned;
        the result then has needs_confirmation=True and nobody is signed in.
        """
        error = self._check_credentials(email, password)
        if error:
            return AuthResult(success=False, error_message=error)
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthResult(
                success=False,
                error_message=f"A senha deve ter pelo menos {MIN_PASSWORD_LENGTH} caracteres",
            )

        is_configured, config_error = self.is_configured()
        if not is_configured:
            return AuthResult(success=False, error_message=config_error)

        try:
            response = self.client.auth.sign_up({
                "email": email.lower().strip(),
                "password": password,
            })
        except Exception as e:
            logger.warning(f"Sign-up failed: {type(e).__name__}: {e}")
            return AuthResult(success=False, error_message=str(e))

        user = _to_user(response.user)
        if user is None:
            return AuthResult(success=False, error_message="Não foi possível criar a conta")

        if response.session is None:
            logger.info(f"Sign-up pending email confirmation for {user.email}")
            return AuthResult(success=True, user=user, needs_confirmation=True)

        self._remember(user, response.session)
        logger.info(f"User signed up: {user.id}")
        return AuthResult(success=True, user=user)

    def sign_in(self, email: str, password: str) -> AuthResult:
        error = self._check_credentials(email, password)
        if error:
            return AuthResult(success=False, error_message=error)

        is_configured, config_error = self.is_configured()
        if not is_configured:
            return AuthResult(success=False, error_message=config_error)

        try:
            response = self.client.auth.sign_in_with_password({
                "email": email.lower().strip(),
                "password": password,
            })
        except Exception as e:
            logger.warning(f"Sign-in failed: {type(e).__name__}")
            return AuthResult(success=False, error_message="Email ou senha incorretos!")

        user = _to_user(response.user)
        if user is None:
            return AuthResult(success=False, error_message="Email ou senha incorretos!")

        self._remember(user, response.session)
        logger.info(f"User signed in: {user.id}")
        return AuthResult(success=True, user=user)

    def sign_out(self) -> Optional[str]:
        """
        End the session. The local session is always cleared.

        Returns:
            Error message from the provider, or None
        """
        error = None
        if self.client is not None:
            try:
                self.client.auth.sign_out()
            except Exception as e:
                logger.warning(f"Sign-out failed at provider: {type(e).__name__}")
                error = str(e)
        self._forget()
        return error

    def get_current_user(self) -> Optional[User]:
        """The signed-in user, or None. Tries the token cookies once per session."""
        data = self.session_state.get(SESSION_USER_KEY)
        if data:
            return User(id=data["id"], email=data.get("email", ""))
        return self._restore_session()

    def _restore_session(self) -> Optional[User]:
        if self.session_state.get(RESTORE_ATTEMPTED_KEY):
            return None
        self.session_state[RESTORE_ATTEMPTED_KEY] = True

        access_token = self.cookies.get(ACCESS_TOKEN_COOKIE)
        refresh_token = self.cookies.get(REFRESH_TOKEN_COOKIE)
        if not access_token or not refresh_token or self.client is None:
            return None

        try:
            # Refreshes the access token when it has expired
            response = self.client.auth.set_session(access_token, refresh_token)
        except Exception as e:
            logger.info(f"Stored session rejected by provider: {type(e).__name__}")
            self._forget()
            return None

        user = _to_user(response.user)
        if user is None:
            self._forget()
            return None

        self._remember(user, response.session)
        logger.info(f"Session restored: {user.id}")
        return user
