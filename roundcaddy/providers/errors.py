from __future__ import annotations


class ProviderError(RuntimeError):
    """Raised when a remote backend or data provider cannot satisfy a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = ["ProviderError"]
