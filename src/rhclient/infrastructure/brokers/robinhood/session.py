"""Session state shared by every request of one client"""

from dataclasses import dataclass, field
from enum import Enum


class SessionState(Enum):
    """Login lifecycle of a session

    UNAUTHENTICATED -> AUTHENTICATING -> READY. A failed login falls back
    to UNAUTHENTICATED.
    """

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    READY = "ready"


def default_headers() -> dict[str, str]:
    """Headers sent on every request, before authentication"""
    return {
        "Accept": "*/*",
        "Accept-Encoding": "gzip, deflate",
        "Accept-Language": "en;q=1, fr;q=0.9, de;q=0.8, ja;q=0.7, nl;q=0.6, it;q=0.5",
        "Content-Type": "application/x-www-form-urlencoded; charset=utf-8",
        "X-Robinhood-API-Version": "1.0.0",
        "Connection": "keep-alive",
        "User-Agent": "Robinhood/823 (iPhone; iOS 7.1.2; Scale/2.00)",
    }


@dataclass
class Session:
    """Authenticated context of a client

    Written only by the session manager while logging in; read-only for
    every other component.
    """

    username: str
    password: str = field(repr=False)
    bearer_token: str | None = field(default=None, repr=False)
    headers: dict[str, str] = field(default_factory=default_headers)
    primary_account_url: str | None = None
    state: SessionState = SessionState.UNAUTHENTICATED

    @property
    def is_ready(self) -> bool:
        return self.state is SessionState.READY

    def authorize(self, token: str) -> None:
        """Store the token and add the Authorization header"""
        self.bearer_token = token
        self.headers["Authorization"] = f"Token {token}"

    def reset(self) -> None:
        """Drop every credential obtained from the API"""
        self.bearer_token = None
        self.primary_account_url = None
        self.headers.pop("Authorization", None)
        self.state = SessionState.UNAUTHENTICATED
