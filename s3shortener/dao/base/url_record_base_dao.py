"""Contract every URL record store implements

Services only ever talk to this interface; `build_record_dao()` picks the
concrete backend (S3 or Redis) from configuration.

Records are immutable: there is no update operation. Uniqueness of codes is
enforced by the store itself through `insert`, which must be an atomic
create-if-absent, so concurrent writers never need client-side locking.
"""

from abc import ABC, abstractmethod

from s3shortener.models import UrlRecordModel


class UrlRecordBaseDAO(ABC):
    """Interface for URL record data access objects

    Implementations must be safe to share between concurrent invocations:
    no per-request state lives on the instance.

    Failures of the underlying store (unreachable, timed out, throttled,
    unreadable data) surface as DataStoreError from every method.
    """

    @abstractmethod
    def insert(self, record: UrlRecordModel, **kwargs) -> 'UrlRecordBaseDAO':
        """Store `record` only if its code is free; returns self.

        Raises:
            UrlRecordAlreadyExistsError: the code is already taken (nothing was written).
            DataStoreError: the store failed. After a timeout the write may or may not have been applied.
        """

    @abstractmethod
    def get(self, code: str, **kwargs) -> UrlRecordModel:
        """Fetch the record stored under `code`, expired or not.

        Raises:
            UrlRecordNotFoundError: no record exists under `code`.
            DataStoreError: the store failed.
        """

    @abstractmethod
    def delete(self, code: str, **kwargs) -> 'UrlRecordBaseDAO':
        """Remove the record under `code`; deleting a missing record is not an error. Returns self."""
