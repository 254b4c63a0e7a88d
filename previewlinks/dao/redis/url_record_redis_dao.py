"""Data Access Object (DAO) implementation for managing UrlRecords in Redis

This module provides a Redis-based implementation of UrlRecordBaseDAO.

Layout:
    <prefix>:links:<shortcode>
        Hash holding the record fields (shortCode, canonicalUrl, title,
        description, imageUrl, imageScreenshotUrl). A hash with only the
        shortCode field is an allocation placeholder.
    <prefix>:urls:<xxh3-128 digest of normalized canonical URL>
        Set of shortcodes registered for that canonical URL. Holds at most
        one member while the deduplication invariant holds.

Responsibilities:
    - Reserve shortcodes with a create-if-absent transaction (WATCH/MULTI/EXEC);
    - Bind shortcodes to canonical URLs with an optimistic transaction (WATCH/MULTI/EXEC);
    - Read records by key and shortcodes by canonical URL;
    - Translate Redis connectivity problems into DataStoreError.

Classes:
    UrlRecordRedisDAO:
        DAO for storing and retrieving UrlRecord in a Redis datastore.

Example:
    >>> from previewlinks.models import UrlRecord
    >>> from previewlinks.dao.redis import UrlRecordRedisDAO

    >>> dao = UrlRecordRedisDAO(prefix="previewlinks:dev")
    >>> dao.reserve("0a1b2c3d4e")
    True
    >>> dao.claim("https://example.com/a", "0a1b2c3d4e")
    ['0a1b2c3d4e']
    >>> dao.update(UrlRecord(shortcode="0a1b2c3d4e", canonical_url="https://example.com/a", title="A"))
    <UrlRecordRedisDAO>
    >>> dao.get("0a1b2c3d4e").title
    'A'
"""

import logging

import redis
from beartype import beartype

from previewlinks.models import UrlRecord, FIELD_NAMES
from previewlinks.constants import Limits
from previewlinks.dao.base import UrlRecordBaseDAO
from previewlinks.dao.redis.mixins import RedisClientMixin
from previewlinks.dao.redis.helpers import handle_redis_connection_error
from previewlinks.dao.exceptions import DataStoreError, ShortURLNotFoundError


logger = logging.getLogger(__name__)

SHORTCODE_FIELD = FIELD_NAMES['shortcode']
CANONICAL_URL_FIELD = FIELD_NAMES['canonical_url']


class UrlRecordRedisDAO(RedisClientMixin, UrlRecordBaseDAO):
    """Redis-based Data Access Object (DAO) for managing UrlRecords

    This class implements the UrlRecordBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        get(shortcode: str, **kwargs) -> UrlRecord
        query(canonical_url: str, **kwargs) -> list[str]
        reserve(shortcode: str, **kwargs) -> bool
        claim(canonical_url: str, shortcode: str, **kwargs) -> list[str]
        update(record: UrlRecord, **kwargs) -> UrlRecordRedisDAO
        release(shortcode: str, **kwargs) -> UrlRecordRedisDAO

    See UrlRecordBaseDAO for the contract of each method.
    """

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> UrlRecord:
        """Retrieve a committed UrlRecord by shortcode

        A single HGETALL on the record key. Placeholders created by reserve()
        carry no canonical URL and are reported as missing.

        Raises:
            ShortURLNotFoundError:
                If the key is absent or only holds a placeholder.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('0a1b2c3d4e')
            UrlRecord(shortcode='0a1b2c3d4e', canonical_url='https://example.com/a', ...)
        """
        mapping = self.redis.hgetall(self.keys.link_key(shortcode))
        if not mapping or not mapping.get(CANONICAL_URL_FIELD):
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        return UrlRecord.from_mapping(mapping)

    @handle_redis_connection_error
    @beartype
    def query(self, canonical_url: str, **kwargs) -> list[str]:
        """Return the shortcodes indexed for a canonical URL (sorted)

        Example:
            >>> dao.query('https://example.com/a')
            ['0a1b2c3d4e']
        """
        return sorted(self.redis.smembers(self.keys.url_index_key(canonical_url)))

    @handle_redis_connection_error
    @beartype
    def reserve(self, shortcode: str, **kwargs) -> bool:
        """Create a placeholder for a shortcode unless the key already exists

        The existence check runs under WATCH and the placeholder is written
        together with its TTL in one MULTI/EXEC, so the key never exists
        without an expiry. Concurrent reservations of the same token have a
        single winner:

            (lambda 1): WATCH links:<code> -> EXISTS => 0
            (lambda 2): WATCH links:<code> -> EXISTS => 0
            (lambda 2): MULTI -> HSET + EXPIRE -> EXEC => OK
            (lambda 1): MULTI -> HSET + EXPIRE -> EXEC => WatchError => False

        The TTL frees the code if the registration dies before claim(), which
        clears it.

        Example:
            >>> dao.reserve('0a1b2c3d4e')
            True
            >>> dao.reserve('0a1b2c3d4e')
            False
        """
        link_key = self.keys.link_key(shortcode)
        with self.redis.pipeline(transaction=True) as pipe:
            try:
                pipe.watch(link_key)
                if pipe.exists(link_key):
                    return False

                pipe.multi()
                pipe.hset(link_key, SHORTCODE_FIELD, shortcode)
                pipe.expire(link_key, Limits.RESERVATION_TTL_SECONDS)
                pipe.execute()
                return True
            except redis.exceptions.WatchError:
                logger.debug('Shortcode reserved concurrently.', extra={'shortcode': shortcode})
                return False

    @handle_redis_connection_error
    @beartype
    def claim(self, canonical_url: str, shortcode: str, **kwargs) -> list[str]:
        """Bind a shortcode to a canonical URL unless another one is bound already

        The read of the index set and the SADD run under WATCH, so the SADD is
        only applied if nobody modified the index in between:

            (lambda 1): WATCH urls:<digest> -> SMEMBERS => {}
            (lambda 2): WATCH urls:<digest> -> SMEMBERS => {}
            (lambda 2): MULTI -> SADD urls:<digest> <code 2> -> EXEC => OK
            (lambda 1): MULTI -> SADD urls:<digest> <code 1> -> EXEC => WatchError
            (lambda 1): retry: WATCH -> SMEMBERS => {<code 2>} => return [<code 2>]

        The SADD and a PERSIST of the placeholder commit together. Once indexed,
        a code never expires, even if the registration dies before update().

        Returns:
            list[str]: [shortcode] if bound, else the already-bound shortcodes.

        Raises:
            DataStoreError:
                If the index keeps changing for MAX_CLAIM_ATTEMPTS rounds, or on
                Redis connectivity issues.
        """
        index_key = self.keys.url_index_key(canonical_url)
        link_key = self.keys.link_key(shortcode)

        for attempt in range(1, Limits.MAX_CLAIM_ATTEMPTS + 1):
            with self.redis.pipeline(transaction=True) as pipe:
                try:
                    pipe.watch(index_key)
                    indexed = pipe.smembers(index_key)
                    if indexed:
                        return sorted(indexed)

                    pipe.multi()
                    pipe.sadd(index_key, shortcode)
                    pipe.persist(link_key)
                    pipe.execute()
                    return [shortcode]
                except redis.exceptions.WatchError:
                    logger.debug('Canonical URL index changed during claim, retrying.', extra={'shortcode': shortcode, 'attempt': attempt})

        raise DataStoreError(f"Could not claim canonical URL for code '{shortcode}' after {Limits.MAX_CLAIM_ATTEMPTS} attempts.")

    @handle_redis_connection_error
    @beartype
    def update(self, record: UrlRecord, **kwargs) -> 'UrlRecordRedisDAO':
        """Write every field of the record and drop the placeholder TTL

        HSET and PERSIST run in one MULTI/EXEC so a committed record can never
        be left with the placeholder expiry.

        Example:
            >>> dao.update(UrlRecord(shortcode='0a1b2c3d4e', canonical_url='https://example.com/a'))
            <UrlRecordRedisDAO>
        """
        link_key = self.keys.link_key(record.shortcode)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(link_key, mapping=record.to_mapping())
            pipe.persist(link_key)
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def release(self, shortcode: str, **kwargs) -> 'UrlRecordRedisDAO':
        """Delete an uncommitted placeholder

        Only called for shortcodes that lost a claim() race. Such a shortcode
        is not indexed anywhere, so no other request can be writing to it.
        """
        self.redis.delete(self.keys.link_key(shortcode))
        return self
