"""
Infrastructure layer: Owner-scoped record storage.

Every lookup is keyed by (owner_id, record_id); a record belonging to
another owner is indistinguishable from a missing one.
"""
from typing import Any, Dict, Generic, List, Optional, Protocol, Type, TypeVar
import logging
import threading

from pydantic import BaseModel
from pydantic_core import to_jsonable_python
from pymongo import DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection

from forge.domain.models import Farm, SiteEvaluation, utcnow

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class Repository(Protocol[RecordT]):
    """Persistence collaborator used by the application services."""

    def get(self, owner_id: str, record_id: str) -> Optional[RecordT]: ...

    def list(self, owner_id: str, **filters: Any) -> List[RecordT]: ...

    def create(self, record: RecordT) -> RecordT: ...

    def update(self, owner_id: str, record_id: str, changes: Dict[str, Any]) -> Optional[RecordT]: ...

    def delete(self, owner_id: str, record_id: str) -> bool: ...


EvaluationRepository = Repository[SiteEvaluation]
FarmRepository = Repository[Farm]


class InMemoryRepository(Generic[RecordT]):
    """
    Process-local repository.

    Records are copied on the way in and out so callers never hold a
    reference into the store.
    """

    def __init__(self, sort_field: str = "updated_at"):
        self.sort_field = sort_field
        self._records: Dict[str, RecordT] = {}
        self._lock = threading.Lock()

    def get(self, owner_id: str, record_id: str) -> Optional[RecordT]:
        with self._lock:
            record = self._records.get(record_id)
        if record is None or record.owner_id != owner_id:
            return None
        return record.model_copy(deep=True)

    def list(self, owner_id: str, **filters: Any) -> List[RecordT]:
        with self._lock:
            records = list(self._records.values())
        matches = [
            record.model_copy(deep=True)
            for record in records
            if record.owner_id == owner_id
            and all(getattr(record, key) == value for key, value in filters.items() if value is not None)
        ]
        return sorted(matches, key=lambda r: getattr(r, self.sort_field), reverse=True)

    def create(self, record: RecordT) -> RecordT:
        with self._lock:
            self._records[record.id] = record.model_copy(deep=True)
        return record.model_copy(deep=True)

    def update(self, owner_id: str, record_id: str, changes: Dict[str, Any]) -> Optional[RecordT]:
        with self._lock:
            record = self._records.get(record_id)
            if record is None or record.owner_id != owner_id:
                return None
            updated = record.model_copy(update={**changes, "updated_at": utcnow()}, deep=True)
            self._records[record_id] = updated
        return updated.model_copy(deep=True)

    def delete(self, owner_id: str, record_id: str) -> bool:
        with self._lock:
            record = self._records.get(record_id)
            if record is None or record.owner_id != owner_id:
                return False
            del self._records[record_id]
        return True


class MongoRepository(Generic[RecordT]):
    """
    MongoDB-backed repository.

    Documents store the record id as ``_id`` and are always queried
    together with ``owner_id``.
    """

    def __init__(
        self,
        collection: Collection,
        model: Type[RecordT],
        sort_field: str = "updated_at",
    ):
        self.collection = collection
        self.model = model
        self.sort_field = sort_field

    def _to_document(self, record: RecordT) -> Dict[str, Any]:
        document = record.model_dump(mode="json")
        document["_id"] = document.pop("id")
        return document

    def _from_document(self, document: Optional[Dict[str, Any]]) -> Optional[RecordT]:
        if document is None:
            return None
        document = dict(document)
        document["id"] = str(document.pop("_id"))
        return self.model.model_validate(document)

    def get(self, owner_id: str, record_id: str) -> Optional[RecordT]:
        return self._from_document(
            self.collection.find_one({"_id": record_id, "owner_id": owner_id})
        )

    def list(self, owner_id: str, **filters: Any) -> List[RecordT]:
        query = {"owner_id": owner_id}
        query.update({key: value for key, value in filters.items() if value is not None})
        cursor = self.collection.find(query).sort(self.sort_field, DESCENDING)
        return [self._from_document(document) for document in cursor]

    def create(self, record: RecordT) -> RecordT:
        self.collection.insert_one(self._to_document(record))
        return record

    def update(self, owner_id: str, record_id: str, changes: Dict[str, Any]) -> Optional[RecordT]:
        fields = to_jsonable_python({**changes, "updated_at": utcnow()})
        document = self.collection.find_one_and_update(
            {"_id": record_id, "owner_id": owner_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        return self._from_document(document)

    def delete(self, owner_id: str, record_id: str) -> bool:
        result = self.collection.delete_one({"_id": record_id, "owner_id": owner_id})
        return result.deleted_count == 1


class RepositoryRegistry:
    """Holds the evaluation and farm repositories for one storage backend."""

    def __init__(self, evaluations: EvaluationRepository, farms: FarmRepository):
        self.evaluations = evaluations
        self.farms = farms

    @classmethod
    def in_memory(cls) -> "RepositoryRegistry":
        return cls(
            evaluations=InMemoryRepository[SiteEvaluation](sort_field="updated_at"),
            farms=InMemoryRepository[Farm](sort_field="created_at"),
        )

    @classmethod
    def mongo(cls, client: MongoClient, database: str) -> "RepositoryRegistry":
        db = client[database]
        logger.info(f"Using MongoDB database '{database}'")
        return cls(
            evaluations=MongoRepository(db["site_evaluations"], SiteEvaluation, sort_field="updated_at"),
            farms=MongoRepository(db["farms"], Farm, sort_field="created_at"),
        )
