from typing import cast
from unittest.mock import MagicMock

import pytest

from previewlinks.models import UrlRecord
from previewlinks.dao.base import UrlRecordBaseDAO
from previewlinks.dao.exceptions import ShortURLNotFoundError, DataStoreError
from previewlinks.exceptions import InvalidArgumentError, NotFoundError
from previewlinks.services import Resolver


@pytest.fixture
def record() -> UrlRecord:
    return UrlRecord(shortcode='0a1b2c3d4e', canonical_url='https://example.com/a', title='A')


@pytest.fixture
def dao(record: UrlRecord) -> UrlRecordBaseDAO:
    mock = cast(UrlRecordBaseDAO, MagicMock(spec=UrlRecordBaseDAO))
    mock.get.return_value = record
    return mock


def test_validate_returns_stripped_shortcode():
    assert Resolver.validate(' 0a1b2c3d4e\n') == '0a1b2c3d4e'


def test_resolve(dao, record):
    assert Resolver(dao).resolve('0a1b2c3d4e') == record
    dao.get.assert_called_once_with('0a1b2c3d4e')


def test_resolve_strips_whitespace(dao):
    Resolver(dao).resolve(' 0a1b2c3d4e\n')
    dao.get.assert_called_once_with('0a1b2c3d4e')


@pytest.mark.parametrize('shortcode', [None, '', '   '])
def test_resolve_missing_shortcode(dao, shortcode):
    with pytest.raises(InvalidArgumentError, match='missing shortcode'):
        Resolver(dao).resolve(shortcode)
    dao.get.assert_not_called()


@pytest.mark.parametrize('shortcode', ['abc', '0A1B2C3D4E', '0a1b2c3d4e0', '../etc/pw', '0a1b2c3d4z'])
def test_resolve_malformed_shortcode(dao, shortcode):
    with pytest.raises(InvalidArgumentError, match='malformed shortcode'):
        Resolver(dao).resolve(shortcode)
    dao.get.assert_not_called()


def test_resolve_unknown_shortcode(dao):
    dao.get.side_effect = ShortURLNotFoundError("Short URL with code 'ffffffffff' not found.")

    with pytest.raises(NotFoundError):
        Resolver(dao).resolve('ffffffffff')


def test_resolve_store_failure_is_not_a_not_found(dao):
    dao.get.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")

    with pytest.raises(DataStoreError) as exc_info:
        Resolver(dao).resolve('0a1b2c3d4e')
    assert not isinstance(exc_info.value, NotFoundError)


def test_resolve_after_register_round_trip(memory_dao):
    record = UrlRecord(shortcode='0a1b2c3d4e', canonical_url='https://example.com/a', image_url='https://img/a.png')
    memory_dao.reserve(record.shortcode)
    memory_dao.update(record)

    assert Resolver(memory_dao).resolve('0a1b2c3d4e') == record
