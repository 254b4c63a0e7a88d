"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLNotFoundError:
        Raised when no committed UrlRecord exists for a shortcode.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Both concrete errors also derive from the application taxonomy in
previewlinks.exceptions, so callers outside the DAO layer can catch
NotFoundError / UpstreamFailureError without knowing about DAOs.

Example:
    >>> from previewlinks.dao.exceptions import ShortURLNotFoundError
    >>> raise ShortURLNotFoundError("Short URL with code '0a1b2c3d4e' not found.")
    Traceback (most recent call last):
        ...
    previewlinks.dao.exceptions.ShortURLNotFoundError: Short URL with code '0a1b2c3d4e' not found.
"""

from previewlinks.exceptions import NotFoundError, UpstreamFailureError


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class ShortURLNotFoundError(DAOError, NotFoundError):
    """Exception raised when a UrlRecord is not found in the data store."""

    pass


class DataStoreError(DAOError, UpstreamFailureError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass
