"""Custom exceptions for sitebuildr-py."""

from __future__ import annotations


class SitebuildrError(Exception):
    """Base exception class for all sitebuildr-py errors."""


class ValidationError(SitebuildrError):
    """Raised when a mutation or payload is malformed.

    Examples are unknown props for an element kind, a responsive override for a
    breakpoint other than tablet or mobile, or moving an element into its own
    subtree.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Initialize the exception with a custom message.

        Args:
            message: Description of why the mutation was rejected.
            field: Optional name of the offending field.
        """
        self.field = field
        super().__init__(message)


class ElementNotFoundError(SitebuildrError):
    """Raised when an element with the specified ID cannot be found.

    Attributes:
        element_id: The ID of the element that was not found.
    """

    def __init__(self, element_id: str) -> None:
        """Initialize the exception with the element ID.

        Args:
            element_id: The ID of the element that was not found.
        """
        self.element_id = element_id
        super().__init__(f"Element with ID {element_id} not found")


class DocumentNotFoundError(SitebuildrError):
    """Raised when no document is stored for a website.

    Attributes:
        website_id: The website whose document was requested.
    """

    def __init__(self, website_id: str) -> None:
        """Initialize the exception with the website ID.

        Args:
            website_id: The website whose document was requested.
        """
        self.website_id = website_id
        super().__init__(f"No document stored for website {website_id}")


class PersistenceError(SitebuildrError):
    """Raised when a document cannot be persisted to the backend."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Description of the failure.
            status_code: HTTP status returned by the backend, if any.
        """
        self.status_code = status_code
        super().__init__(message)
