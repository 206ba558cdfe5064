"""Exceptions raised by wpconflicts."""


class WPConflictsError(Exception):
    """Base exception class for all wpconflicts errors."""


class MalformedVersion(WPConflictsError, ValueError):
    """Raised when a version string cannot be parsed."""

    def __init__(self, raw: str | None):
        self.raw = raw
        super().__init__(f"unable to parse {raw!r}: malformed version string")


class EmptyEntitySlug(WPConflictsError, ValueError):
    """Raised when a plugin or theme entity is built without a slug."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"empty entity slug for {kind}")


class FeedFetchFailed(WPConflictsError):
    """Raised when the vulnerability feed cannot be fetched or decoded."""

    def __init__(self, message: str, url: str | None = None, status: int | None = None):
        self.url = url
        self.status = status

        if url:
            message = f"failed to fetch vulnerabilities from feed {url}: {message}"

        super().__init__(message)


class EmptyFeedResult(WPConflictsError):
    """Raised when the feed yields no vulnerabilities after exclusions."""

    def __init__(self, url: str | None = None):
        self.url = url
        message = "no vulnerabilities found from feed"
        if url:
            message += f" {url}"
        super().__init__(message)


class DocumentMergeFailed(WPConflictsError):
    """Raised when either side of a JSON document merge is invalid."""

    def __init__(self, message: str, side: str | None = None):
        self.side = side

        if side:
            message = f"cannot merge {side} document: {message}"

        super().__init__(message)


class ConfigurationError(WPConflictsError):
    """Raised when configuration is invalid."""
