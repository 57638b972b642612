"""
Error types raised by the conversation-state core.
"""


class LegalAssistantError(Exception):
    """Base class for errors raised by this package."""


class ParseError(LegalAssistantError):
    """The AI query parser was unreachable or returned unusable data."""


class PersistenceError(LegalAssistantError):
    """The conversation state store could not be read or written."""


class DirectoryError(LegalAssistantError):
    """A call to the lawyer directory failed."""


class CorrectionError(DirectoryError):
    """Exact or fuzzy location lookup failed."""


class SearchError(DirectoryError):
    """A lawyer search tier failed."""
