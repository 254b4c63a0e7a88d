import threading

import pytest

from previewlinks.models import UrlRecord
from previewlinks.dao.base import UrlRecordBaseDAO
from previewlinks.dao.exceptions import ShortURLNotFoundError
from previewlinks.utils.helpers import normalize_url


class InMemoryUrlRecordDAO(UrlRecordBaseDAO):
    """Thread-safe in-memory UrlRecordBaseDAO with the same atomicity as the Redis DAO.

    reserve() and claim() are atomic under a lock, like their WATCH/MULTI/EXEC counterparts.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.records: dict[str, dict[str, str]] = {}
        self.index: dict[str, set[str]] = {}

    def get(self, shortcode: str, **kwargs) -> UrlRecord:
        with self._lock:
            mapping = dict(self.records.get(shortcode, {}))
        if not mapping.get('canonicalUrl'):
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return UrlRecord.from_mapping(mapping)

    def query(self, canonical_url: str, **kwargs) -> list[str]:
        with self._lock:
            return sorted(self.index.get(normalize_url(canonical_url), set()))

    def reserve(self, shortcode: str, **kwargs) -> bool:
        with self._lock:
            if shortcode in self.records:
                return False
            self.records[shortcode] = {'shortCode': shortcode}
            return True

    def claim(self, canonical_url: str, shortcode: str, **kwargs) -> list[str]:
        with self._lock:
            indexed = self.index.setdefault(normalize_url(canonical_url), set())
            if indexed:
                return sorted(indexed)
            indexed.add(shortcode)
            return [shortcode]

    def update(self, record: UrlRecord, **kwargs) -> 'InMemoryUrlRecordDAO':
        with self._lock:
            self.records[record.shortcode] = record.to_mapping()
        return self

    def release(self, shortcode: str, **kwargs) -> 'InMemoryUrlRecordDAO':
        with self._lock:
            self.records.pop(shortcode, None)
        return self

    def committed(self) -> list[UrlRecord]:
        with self._lock:
            mappings = [dict(m) for m in self.records.values() if m.get('canonicalUrl')]
        return [UrlRecord.from_mapping(m) for m in mappings]


@pytest.fixture
def memory_dao() -> InMemoryUrlRecordDAO:
    return InMemoryUrlRecordDAO()
