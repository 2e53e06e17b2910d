"""Bitbucket Server client exceptions."""


class BitbucketError(Exception):
    """Base exception for every failure surfaced by the client.

    ``status`` is the HTTP status of the response, or 0 when no response was
    received at all.
    """

    def __init__(self, status: int, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
        self.cause = cause


class TransportError(BitbucketError):
    """Raised when the connection fails, times out or the body cannot be read."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(0, message, cause)


class UnexpectedStatusError(BitbucketError):
    """Raised when a response arrives with a status the operation does not accept."""

    def __init__(self, status: int, reason: str, body: str) -> None:
        super().__init__(status, f"HTTP request error. Status: {status}: {reason}.\n{body}")
        self.reason = reason
        self.body = body


class DecodeError(BitbucketError):
    """Raised when a response body does not match the expected resource shape."""

    def __init__(self, resource: str, cause: BaseException | None = None) -> None:
        super().__init__(0, f"invalid {resource} response", cause)
        self.resource = resource


class EncodingError(BitbucketError):
    """Raised before sending when a request payload cannot be serialized."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(0, message, cause)


class MissingRepositoryError(BitbucketError):
    """Raised before sending when a repository scoped call is made without a repository."""

    def __init__(self, owner: str) -> None:
        super().__init__(0, f"No repository configured for owner {owner}")
        self.owner = owner
