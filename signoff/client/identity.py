import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from signoff.client.errors import SignoffError

logger = logging.getLogger(__name__)

AuthListener = Callable[[str, "Session | None"], None]


@dataclass(frozen=True)
class Session:
    email: str | None
    access_token: str = ""
    local_demo: bool = False


class IdentityProvider(Protocol):
    async def get_current_session(self) -> Session | None: ...

    async def get_token(self, session: Session | None) -> str: ...

    async def sign_in_with_password(self, email: str, password: str) -> Session: ...

    async def sign_in_with_one_time_link(self, email: str) -> None: ...

    async def sign_out(self) -> None: ...

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]: ...


def actor_label(session: Session | None, role: str) -> str:
    if session and session.email:
        return session.email
    return "Reviewer" if role == "reviewer" else "Creator"


class _ListenerMixin:
    def __init__(self):
        self._listeners: list[AuthListener] = []

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, event: str, session: Session | None) -> None:
        for listener in list(self._listeners):
            listener(event, session)


class DevIdentity(_ListenerMixin):
    """Offline identity for the local demo; never yields a bearer token."""

    def __init__(self, email: str = "dev@local.test"):
        super().__init__()
        self._session: Session | None = Session(email=email, local_demo=True)

    @property
    def session(self) -> Session | None:
        return self._session

    async def get_current_session(self) -> Session | None:
        return self._session

    async def get_token(self, session: Session | None) -> str:
        return ""

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        self._session = Session(email=email.strip() or "dev@local.test", local_demo=True)
        self._emit("SIGNED_IN", self._session)
        return self._session

    async def sign_in_with_one_time_link(self, email: str) -> None:
        await self.sign_in_with_password(email, "")

    async def sign_out(self) -> None:
        self._session = None
        self._emit("SIGNED_OUT", None)


class StaticTokenIdentity(_ListenerMixin):
    """Identity backed by a pre-issued API token.

    Password sign-in treats the password as the token, matching how
    ``API_TOKENS`` is provisioned on the server.
    """

    def __init__(self, email: str | None = None, token: str = ""):
        super().__init__()
        self._session: Session | None = (
            Session(email=email, access_token=token) if token else None
        )

    @property
    def session(self) -> Session | None:
        return self._session

    async def get_current_session(self) -> Session | None:
        return self._session

    async def get_token(self, session: Session | None) -> str:
        current = self._session or session
        return current.access_token if current else ""

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        if not password:
            raise SignoffError("An API token is required to sign in.")
        self._session = Session(email=email.strip().lower(), access_token=password)
        self._emit("SIGNED_IN", self._session)
        return self._session

    async def sign_in_with_one_time_link(self, email: str) -> None:
        raise SignoffError("One-time sign-in links are not available for token auth.")

    async def sign_out(self) -> None:
        self._session = None
        logger.info("Signed out")
        self._emit("SIGNED_OUT", None)
