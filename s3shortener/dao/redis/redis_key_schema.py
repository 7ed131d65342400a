from s3shortener.dao.key_schema import KeySchema, namespaced


__all__ = ['RedisKeySchema']


class RedisKeySchema(KeySchema):
    """Redis keys of URL records

        >>> RedisKeySchema(prefix='s3shortener:prod').record_key('aZ3kP9xQ')
        's3shortener:prod:links:aZ3kP9xQ:record'
    """

    @namespaced
    def record_key(self, code: str) -> str:
        return f'links:{code}:record'
