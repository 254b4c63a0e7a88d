from previewlinks.models import UrlRecord
from previewlinks.dao.base import UrlRecordBaseDAO
from previewlinks.exceptions import InvalidArgumentError
from previewlinks.utils.shortener import is_valid_shortcode


class Resolver:
    """Look up registered links by shortcode."""

    def __init__(self, dao: UrlRecordBaseDAO):
        self.dao = dao

    @staticmethod
    def validate(shortcode: str | None) -> str:
        """Return the whitespace-stripped shortcode.

        Raises:
            InvalidArgumentError: If the code is empty or not shaped like a generated shortcode.
        """
        shortcode = (shortcode or '').strip()
        if not shortcode:
            raise InvalidArgumentError('missing shortcode')
        if not is_valid_shortcode(shortcode):
            raise InvalidArgumentError('malformed shortcode')
        return shortcode

    def resolve(self, shortcode: str | None) -> UrlRecord:
        """Return the record stored under a shortcode.

        Malformed codes are rejected before the store is touched. The lookup
        is a single key read.

        Raises:
            InvalidArgumentError: See validate().
            ShortURLNotFoundError: If no record exists for the code (a NotFoundError).
            DataStoreError: If the store is unreachable.
        """
        return self.dao.get(self.validate(shortcode))
