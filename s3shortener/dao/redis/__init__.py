from s3shortener.dao.redis.redis_key_schema import RedisKeySchema
from s3shortener.dao.redis.url_record_redis_dao import UrlRecordRedisDAO
from s3shortener.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'UrlRecordRedisDAO',
    'RedisClientMixin',
]
