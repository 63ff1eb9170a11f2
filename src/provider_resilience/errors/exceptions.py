"""
Provider failure type.

Operations wrapped by the retry executor report failures as ProviderError.
Anything else they raise is coerced into one so classification always sees
the same shape: a message, optional details and an optional HTTP status.
"""

from typing import Optional


class ProviderError(Exception):
    """
    Raw failure reported by a language-model provider.

    Attributes are read-only; the instance is a value describing what the
    provider said, not something the retry layer annotates.
    """

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        http_status: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self._message = message
        self._details = details
        self._http_status = http_status

    @property
    def message(self) -> str:
        return self._message

    @property
    def details(self) -> Optional[str]:
        return self._details

    @property
    def http_status(self) -> Optional[int]:
        return self._http_status

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self._message!r}, "
            f"details={self._details!r}, http_status={self._http_status!r})"
        )

    @classmethod
    def coerce(cls, exc: BaseException) -> "ProviderError":
        """
        Return ``exc`` itself if it is a ProviderError, otherwise wrap it.

        SDK exceptions commonly expose ``status_code`` (httpx, openai) or a
        ``details`` payload; both are carried over when present.
        """
        if isinstance(exc, ProviderError):
            return exc

        details = getattr(exc, "details", None)
        if details is not None and not isinstance(details, str):
            details = str(details)

        status = getattr(exc, "http_status", None)
        if status is None:
            status = getattr(exc, "status_code", None)
        if not isinstance(status, int):
            status = None

        message = str(exc) or type(exc).__name__
        return cls(message, details=details or None, http_status=status)
