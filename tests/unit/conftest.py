import threading

import pytest

from s3shortener.models import UrlRecordModel
from s3shortener.dao.base import UrlRecordBaseDAO
from s3shortener.dao.exceptions import DataStoreError, UrlRecordAlreadyExistsError, UrlRecordNotFoundError


class InMemoryUrlRecordDAO(UrlRecordBaseDAO):
    """Thread-safe dict-backed record store with create-if-absent inserts.

    `fail_with` makes every call raise the given exception, simulating an unavailable store.
    """

    def __init__(self):
        self.records: dict[str, UrlRecordModel] = {}
        self.inserts: list[str] = []
        self.deletes: list[str] = []
        self.fail_with: Exception | None = None
        self._lock = threading.Lock()

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    def insert(self, record, **kwargs):
        self._maybe_fail()
        with self._lock:
            self.inserts.append(record.code)
            if record.code in self.records:
                raise UrlRecordAlreadyExistsError(f"URL record with code '{record.code}' already exists.")
            self.records[record.code] = record
        return self

    def get(self, code, **kwargs):
        self._maybe_fail()
        with self._lock:
            if code not in self.records:
                raise UrlRecordNotFoundError(f"URL record with code '{code}' not found.")
            return self.records[code]

    def delete(self, code, **kwargs):
        self._maybe_fail()
        with self._lock:
            self.deletes.append(code)
            self.records.pop(code, None)
        return self


@pytest.fixture
def dao():
    return InMemoryUrlRecordDAO()


@pytest.fixture
def store_down():
    return DataStoreError("Can't reach S3 bucket 'test-bucket' (ConnectTimeoutError).")
