import time
from dataclasses import dataclass

from s3shortener.types import RecordDocument


@dataclass(frozen=True)
class UrlRecordModel:
    """Represent a shortened URL record.

    Attributes:
        code (str):
            The unique short identifier of the record.
        original_url (str):
            The original long URL that the code resolves to.
        expiration_time (int):
            Absolute expiry instant as seconds since the Unix epoch. The record
            is expired from this instant onwards.

    Example:
        >>> record = UrlRecordModel(
        ...     code='aZ3kP9xQ',
        ...     original_url='https://example.com/article/123',
        ...     expiration_time=9999999999,
        ... )
        >>> record.to_document()
        {'originalUrl': 'https://example.com/article/123', 'expirationTime': 9999999999}
        >>> record.is_expired(now=1)
        False
    """

    code: str
    original_url: str
    expiration_time: int

    def is_expired(self, now: float | None = None) -> bool:
        """Return True once `now` (defaults to the current time) reaches the expiration time."""
        now = time.time() if now is None else now
        return now >= self.expiration_time

    def to_document(self) -> RecordDocument:
        """Serialize the record into its persisted JSON document shape."""
        return {
            'originalUrl': self.original_url,
            'expirationTime': self.expiration_time,
        }

    @classmethod
    def from_document(cls, code: str, document: RecordDocument) -> 'UrlRecordModel':
        """Deserialize a persisted JSON document into a record.

        Args:
            code (str):
                Code the document is stored under (not part of the document itself).
            document (dict):
                Parsed JSON document with `originalUrl` and `expirationTime`.

        Returns:
            UrlRecordModel: the reconstructed record.

        Raises:
            ValueError:
                If the document is not an object, misses a field, or a field has the wrong type.
        """
        if not isinstance(document, dict):
            raise ValueError(f"Record document for code '{code}' must be a JSON object (given type: {type(document)}).")

        original_url = document.get('originalUrl')
        expiration_time = document.get('expirationTime')

        if not isinstance(original_url, str) or not original_url:
            raise ValueError(f"Record document for code '{code}' has no valid 'originalUrl'.")
        # NOTE: bool is a subclass of int and must not pass as a timestamp
        if not isinstance(expiration_time, int) or isinstance(expiration_time, bool):
            raise ValueError(f"Record document for code '{code}' has no valid 'expirationTime'.")

        return cls(code=code, original_url=original_url, expiration_time=expiration_time)
