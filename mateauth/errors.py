from __future__ import annotations


class RequestError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingCredential(RequestError):
    """Bearer call attempted without a token. Raised before any I/O."""

    def __init__(self, message: str = "Missing authorization token."):
        super().__init__(message)


class RequestFailed(RequestError):
    def __init__(self, message: str, status_code: int, method: str, url: str):
        super().__init__(message)
        self.status_code = status_code
        self.method = method
        self.url = url
