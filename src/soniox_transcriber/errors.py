from __future__ import annotations


class SonioxError(Exception):
    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.cause = cause


class SonioxValidationError(SonioxError, ValueError):
    def __init__(self, message: str) -> None:
        super().__init__(message, "VALIDATION_ERROR")


class SonioxTimeoutError(SonioxError, TimeoutError):
    def __init__(self, message: str) -> None:
        super().__init__(message, "TIMEOUT_ERROR")


class SonioxAPIError(SonioxError):
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: BaseException | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message, "API_ERROR", status_code, cause)
        self.detail = detail

    def __str__(self) -> str:
        text = self.message
        if self.status_code is not None:
            text = f"{text} ({self.status_code})"
        if self.detail:
            text = f"{text}: {self.detail}"
        return text
