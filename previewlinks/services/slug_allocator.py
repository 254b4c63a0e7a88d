"""Shortcode allocation

A generated token only becomes a shortcode once the store has accepted a
create-if-absent placeholder for it. The existence check and the write are the
same store operation, so two concurrent allocations can never commit the same
code.

Example:
    >>> allocator = SlugAllocator(dao)
    >>> allocator.allocate()
    '9f3b2c71aa'
"""

import logging
from collections.abc import Callable

from previewlinks.constants import Limits
from previewlinks.dao.base import UrlRecordBaseDAO
from previewlinks.exceptions import AllocationExhaustedError
from previewlinks.utils.shortener import generate_shortcode


logger = logging.getLogger(__name__)


class SlugAllocator:
    """Allocate shortcodes that are unique in the store at commit time.

    Attributes:
        dao (UrlRecordBaseDAO):
            Store providing the reserve() create-if-absent primitive.
        max_attempts (int):
            Number of tokens tried before giving up.
        generate (Callable[[], str]):
            Token factory, generate_shortcode by default.
    """

    def __init__(
        self,
        dao: UrlRecordBaseDAO,
        max_attempts: int = Limits.MAX_ALLOCATION_ATTEMPTS,
        generate: Callable[[], str] = generate_shortcode,
    ):
        if max_attempts < 1:
            raise ValueError(f'max_attempts must be at least 1 (given value: {max_attempts}).')

        self.dao = dao
        self.max_attempts = max_attempts
        self.generate = generate

    def allocate(self) -> str:
        """Reserve and return a fresh shortcode.

        Raises:
            AllocationExhaustedError:
                If every one of `max_attempts` tokens was already taken.
            DataStoreError:
                If the store is unreachable.
        """
        for attempt in range(1, self.max_attempts + 1):
            shortcode = self.generate()
            if self.dao.reserve(shortcode):
                return shortcode
            logger.warning('Shortcode collision, retrying.', extra={'shortcode': shortcode, 'attempt': attempt})

        raise AllocationExhaustedError(f'No free shortcode found after {self.max_attempts} attempts.')
