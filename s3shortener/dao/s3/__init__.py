from s3shortener.dao.s3.s3_key_schema import S3KeySchema
from s3shortener.dao.s3.url_record_s3_dao import UrlRecordS3DAO
from s3shortener.dao.s3.mixins import S3ClientMixin


__all__ = [
    'S3KeySchema',
    'UrlRecordS3DAO',
    'S3ClientMixin',
]
