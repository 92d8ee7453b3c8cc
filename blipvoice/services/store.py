import abc
from typing import Dict, Iterator

from blipvoice.core.errors import DuplicateId, NotFound
from blipvoice.models import CallRecord


class CallStore(abc.ABC):
    """Keyed, insertion-ordered collection of call records."""

    @abc.abstractmethod
    def insert(self, record: CallRecord) -> None:
        """Add ``record``; raise DuplicateId if its id is already stored."""

    @abc.abstractmethod
    def find_by_id(self, call_id: str) -> CallRecord:
        """Return the record for ``call_id`` or raise NotFound."""

    @abc.abstractmethod
    def all(self) -> Iterator[CallRecord]:
        """Iterate records oldest first. Each call starts a fresh pass."""

    @abc.abstractmethod
    def __len__(self) -> int:
        ...

    def __contains__(self, call_id: object) -> bool:
        try:
            self.find_by_id(str(call_id))
        except NotFound:
            return False
        return True


class InMemoryCallStore(CallStore):
    def __init__(self) -> None:
        self._records: Dict[str, CallRecord] = {}

    def insert(self, record: CallRecord) -> None:
        if record.id in self._records:
            raise DuplicateId(record.id)
        self._records[record.id] = record

    def find_by_id(self, call_id: str) -> CallRecord:
        try:
            return self._records[call_id]
        except KeyError:
            raise NotFound(call_id) from None

    def all(self) -> Iterator[CallRecord]:
        # Iterate a snapshot so inserts made while a caller is suspended
        # mid-scan do not break the iteration.
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)
