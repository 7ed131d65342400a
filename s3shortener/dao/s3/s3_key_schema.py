from s3shortener.dao.key_schema import KeySchema, namespaced


__all__ = ['S3KeySchema']


class S3KeySchema(KeySchema):
    """Object keys of URL records in the bucket

    Application prefixes use ':' as separator; it is turned into '/' so each
    app and environment gets its own "folder":

        >>> S3KeySchema(prefix='s3shortener:prod').record_key('aZ3kP9xQ')
        's3shortener/prod/aZ3kP9xQ.json'
    """

    separator = '/'

    def normalize_prefix(self, prefix: str) -> str | None:
        return prefix.strip(':/').replace(':', '/') or None

    @namespaced
    def record_key(self, code: str) -> str:
        return f'{code}.json'
