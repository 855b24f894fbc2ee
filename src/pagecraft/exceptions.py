"""Custom exceptions for pagecraft."""


class PagecraftError(Exception):
    """Base exception for pagecraft operations."""


class EmptyDocumentError(PagecraftError):
    """No content to parse where a document was required."""


class TreeIntegrityError(PagecraftError):
    """Component tree references are inconsistent (dangling id or cycle)."""


class TreeEditError(PagecraftError):
    """An editor mutation cannot be applied to the component tree."""
