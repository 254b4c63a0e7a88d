"""Abstract base class for UrlRecord data access objects (DAOs).

This class establishes a consistent contract for all UrlRecord DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, Firestore, DynamoDB).

Responsibilities:
    - Provide direct key lookup, query-by-canonical-URL and conditional writes.
    - Expose the atomic "query + conditional write" primitive that keeps at most
      one record per canonical URL.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from previewlinks.models import UrlRecord
        >>> from previewlinks.dao.redis import UrlRecordRedisDAO

        >>> dao = UrlRecordRedisDAO(...)

        >>> dao.reserve('0a1b2c3d4e')
        True
        >>> dao.claim('https://example.com/a', '0a1b2c3d4e')
        ['0a1b2c3d4e']
        >>> dao.update(UrlRecord(shortcode='0a1b2c3d4e', canonical_url='https://example.com/a'))
        <UrlRecordRedisDAO>

        >>> dao.get('0a1b2c3d4e').canonical_url
        'https://example.com/a'
        >>> dao.query('https://example.com/a')
        ['0a1b2c3d4e']
"""

from abc import ABC, abstractmethod

from previewlinks.models import UrlRecord


class UrlRecordBaseDAO(ABC):
    """Interface for UrlRecord data access objects (DAOs).

    Methods:
        get(shortcode: str, **kwargs) -> UrlRecord:
            Direct key read. Raises ShortURLNotFoundError if absent.

        query(canonical_url: str, **kwargs) -> list[str]:
            Shortcodes of records registered for a canonical URL.

        reserve(shortcode: str, **kwargs) -> bool:
            Create-if-absent placeholder for a shortcode.

        claim(canonical_url: str, shortcode: str, **kwargs) -> list[str]:
            Atomically index a shortcode for a canonical URL unless one is indexed already.

        update(record: UrlRecord, **kwargs) -> UrlRecordBaseDAO:
            Write all record fields under its shortcode.

        release(shortcode: str, **kwargs) -> UrlRecordBaseDAO:
            Drop a placeholder which lost a claim race.

    All methods raise DataStoreError on connection or I/O failure.

    NOTE:
        - Records never expire and are never deleted. release() only removes
          placeholders created by reserve() that were never committed.
    """

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> UrlRecord:
        """Retrieve a UrlRecord from the data store by its shortcode.

        Args:
            shortcode (str):
                The shortcode of the UrlRecord to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlRecord: The committed record.

        Raises:
            ShortURLNotFoundError:
                If no record with the given shortcode exists, or only an
                uncommitted placeholder does.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def query(self, canonical_url: str, **kwargs) -> list[str]:
        """Find the shortcodes registered for a canonical URL.

        Args:
            canonical_url (str):
                Canonical URL to look up.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            list[str]: Zero or more shortcodes. More than one means the
            deduplication invariant was violated.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def reserve(self, shortcode: str, **kwargs) -> bool:
        """Conditionally create a placeholder keyed by shortcode.

        Args:
            shortcode (str):
                Candidate shortcode.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            bool: True if the placeholder was created, False if the key exists.

        NOTE:
            The placeholder expires unless claim() binds it first, so an
            abandoned reservation frees its shortcode.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def claim(self, canonical_url: str, shortcode: str, **kwargs) -> list[str]:
        """Atomically bind a shortcode to a canonical URL if it has none.

        Args:
            canonical_url (str):
                Canonical URL being registered.

            shortcode (str):
                Freshly reserved shortcode.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            list[str]: `[shortcode]` when the claim succeeded, otherwise the
            shortcodes already bound to the canonical URL (nothing is written).

        NOTE:
            A successful claim also drops the placeholder expiry. An indexed
            shortcode must never be handed out again.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def update(self, record: UrlRecord, **kwargs) -> 'UrlRecordBaseDAO':
        """Write all fields of a record under its shortcode.

        Args:
            record (UrlRecord):
                Record to persist. Its shortcode must have been reserved or
                committed before.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlRecordBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def release(self, shortcode: str, **kwargs) -> 'UrlRecordBaseDAO':
        """Remove an uncommitted placeholder.

        Args:
            shortcode (str):
                Shortcode whose placeholder should be dropped.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            UrlRecordBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
