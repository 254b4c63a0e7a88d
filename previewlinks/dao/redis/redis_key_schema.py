import functools
from collections.abc import Callable

import xxhash

from previewlinks.utils.helpers import normalize_url


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "previewlinks:prod" or "previewlinks:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, shortcode: str) -> str:
        return f'links:{shortcode}'

    @prefix_key
    def url_index_key(self, canonical_url: str) -> str:
        # Canonical URLs can be kilobytes long; index them by a fixed-width digest
        digest = xxhash.xxh3_128_hexdigest(normalize_url(canonical_url))
        return f'urls:{digest}'
