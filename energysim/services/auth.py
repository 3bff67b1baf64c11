import logging
from dataclasses import dataclass

import requests

from energysim.core.config import AUTH_API_KEY, AUTH_TIMEOUT, AUTH_URL

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@dataclass
class AuthUser:
    id: str
    email: str | None = None


@dataclass
class Session:
    access_token: str
    user: AuthUser
    refresh_token: str | None = None
    expires_at: int | None = None


@dataclass
class AuthResult:
    """Outcome of an auth call. `error` is a user-facing message or None."""

    session: Session | None = None
    user: AuthUser | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _user_from(data: dict | None) -> AuthUser | None:
    if not data or not data.get("id"):
        return None
    return AuthUser(id=str(data["id"]), email=data.get("email"))


def _session_from(data: dict) -> Session | None:
    token = data.get("access_token")
    user = _user_from(data.get("user"))
    if not token or user is None:
        return None
    return Session(
        access_token=token,
        user=user,
        refresh_token=data.get("refresh_token"),
        expires_at=data.get("expires_at"),
    )


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason or f"Auth request failed ({response.status_code})"


class AuthClient:
    """Email/password and OTP auth against a hosted GoTrue-compatible provider.

    No method raises: failures come back as AuthResult.error.
    """

    def __init__(self, base_url: str | None = None, api_key: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or AUTH_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else AUTH_API_KEY
        self.timeout = timeout or AUTH_TIMEOUT

    def _request(self, method: str, path: str, *, body: dict | None = None,
                 params: dict | None = None, token: str | None = None):
        headers = {"apikey": self.api_key, "Authorization": f"Bearer {token or self.api_key}"}
        try:
            r = requests.request(method, f"{self.base_url}/auth/v1{path}", json=body, params=params,
                                 headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Auth provider unreachable (%s %s): %s", method, path, e)
            return None, "Authentication service unavailable"
        if not r.ok:
            message = _error_message(r)
            logger.warning("Auth %s %s failed (%s): %s", method, path, r.status_code, message)
            return None, message
        if r.status_code == 204 or not r.content:
            return {}, None
        try:
            return r.json(), None
        except ValueError:
            return None, "Authentication service returned an invalid response"

    def sign_up(self, email: str, password: str, confirm_password: str | None = None) -> AuthResult:
        if confirm_password is not None and password != confirm_password:
            return AuthResult(error="Passwords do not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            return AuthResult(error=f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        data, error = self._request("POST", "/signup", body={"email": email, "password": password})
        if error:
            return AuthResult(error=error)
        session = _session_from(data)
        # without auto-confirm the provider answers with the bare user object
        user = session.user if session else _user_from(data.get("user") or data)
        return AuthResult(session=session, user=user)

    def sign_in(self, email: str, password: str) -> AuthResult:
        data, error = self._request("POST", "/token", params={"grant_type": "password"},
                                    body={"email": email, "password": password})
        if error:
            return AuthResult(error=error)
        session = _session_from(data)
        if session is None:
            return AuthResult(error="Sign-in did not return a session")
        return AuthResult(session=session, user=session.user)

    def verify_otp(self, email: str, token: str) -> AuthResult:
        data, error = self._request("POST", "/verify", body={"type": "email", "email": email, "token": token})
        if error:
            return AuthResult(error=error)
        session = _session_from(data)
        if session is None:
            return AuthResult(error="Verification did not return a session")
        return AuthResult(session=session, user=session.user)

    def resend_verification(self, email: str) -> AuthResult:
        _, error = self._request("POST", "/resend", body={"type": "signup", "email": email})
        return AuthResult(error=error)

    def get_user(self, access_token: str) -> AuthResult:
        data, error = self._request("GET", "/user", token=access_token)
        if error:
            return AuthResult(error=error)
        user = _user_from(data)
        if user is None:
            return AuthResult(error="Not authenticated")
        return AuthResult(user=user)

    def sign_out(self, access_token: str) -> AuthResult:
        _, error = self._request("POST", "/logout", token=access_token)
        return AuthResult(error=error)


class SessionContext:
    """The caller's auth session, passed explicitly to request handlers.

    Lifecycle: `restore()` when a request arrives with a bearer token,
    `clear()` on sign-out.
    """

    def __init__(self, client: AuthClient, session: Session | None = None):
        self.client = client
        self.session = session

    @property
    def user(self) -> AuthUser | None:
        return self.session.user if self.session else None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def restore(self, access_token: str) -> AuthResult:
        result = self.client.get_user(access_token)
        if result.ok:
            self.session = Session(access_token=access_token, user=result.user)
        else:
            self.session = None
        return result

    def clear(self) -> AuthResult:
        if self.session is None:
            return AuthResult()
        result = self.client.sign_out(self.session.access_token)
        self.session = None
        return result
