"""API response domain models"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ResponseMetadata:
    """Status information of a completed HTTP exchange"""

    status_code: int
    reason: str
    url: str


@dataclass(frozen=True)
class ApiResponse:
    """Result handed to a caller: ``(error, metadata, body)``"""

    error: BaseException | None = None
    metadata: ResponseMetadata | None = None
    body: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_tuple(self) -> tuple[BaseException | None, ResponseMetadata | None, Any]:
        return self.error, self.metadata, self.body
