"""Authentication port.

Sessions are issued by an external OAuth provider. The storefront only asks
"who is calling?" through this port, so actions can be exercised with a
static session in tests and with the request-scoped session behind the API.
"""

from abc import ABC, abstractmethod
from contextvars import ContextVar
from dataclasses import dataclass

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Session:
    """The authenticated caller of the current request."""

    email: str | None
    id: str | None = None
    role: str | None = None
    name: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


class AuthProvider(ABC):
    """Abstract session lookup."""

    @abstractmethod
    def current_session(self) -> Session | None:
        """Return the caller's session, or ``None`` for anonymous callers."""
        ...


class StaticAuth(AuthProvider):
    """Returns a fixed session; used by tests and scripts."""

    def __init__(self, session: Session | None = None) -> None:
        self.session = session

    def sign_in(self, email, id=None, role=None, name=None) -> Session:  # noqa: A002
        self.session = Session(email=email, id=id, role=role, name=name)
        return self.session

    def sign_out(self) -> None:
        self.session = None

    def current_session(self) -> Session | None:
        return self.session


_request_session: ContextVar[Session | None] = ContextVar("storefront_session", default=None)


class RequestAuth(AuthProvider):
    """Reads the session the HTTP middleware published for this request."""

    def current_session(self) -> Session | None:
        return _request_session.get()


def bind_request_session(session: Session | None):
    """Publish the session for the current request. Returns a reset token."""
    return _request_session.set(session)


def unbind_request_session(token) -> None:
    _request_session.reset(token)


_current_auth: AuthProvider | None = None


def get_auth() -> AuthProvider:
    """Return the active auth provider. Defaults to RequestAuth."""
    global _current_auth
    if _current_auth is None:
        _current_auth = RequestAuth()
    return _current_auth


def set_auth(provider: AuthProvider) -> None:
    """Override the active auth provider (useful for tests)."""
    global _current_auth
    _current_auth = provider


def reset_auth() -> None:
    global _current_auth
    _current_auth = None


def current_session() -> Session | None:
    session = get_auth().current_session()
    if session is None or not session.email:
        return None
    return session
