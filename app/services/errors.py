from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class StatsRequestError(Exception):
    """Structured error for stats API requests.

    The app maps these to HTTP 4xx while keeping a stable machine-readable
    code for the client.
    """

    code: str
    message: str
    status_code: int = 400
    details: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}"


# Error codes (stable API surface)
HISTORY_TOO_LARGE = "HISTORY_TOO_LARGE"
EMPTY_HISTORY = "EMPTY_HISTORY"
UNSUPPORTED_DATA_FORMAT = "UNSUPPORTED_DATA_FORMAT"
