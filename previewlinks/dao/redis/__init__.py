from previewlinks.dao.redis.redis_key_schema import RedisKeySchema
from previewlinks.dao.redis.mixins import RedisClientMixin
from previewlinks.dao.redis.url_record_redis_dao import UrlRecordRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'UrlRecordRedisDAO',
]
