"""
JsonCollection - CRUD over one JSON array in the key-value store.

Every operation is a full read-modify-write of the collection. Unknown IDs
yield None/False rather than raising.
"""

import logging
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from magnolia.errors import InvalidInputError
from magnolia.storage import KeyValueStore
from magnolia.utils.clock import Clock


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def validation_message(error: ValidationError) -> str:
    """Condense a pydantic error into a one-line user-facing message."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


class JsonCollection(Generic[ModelT]):
    """
    Generic repository for a model stored as a JSON array.

    Subclasses set `key`, `model` and `id_prefix`, and may override
    `_prepare_new` / `_merge` to enforce entity rules.
    """

    key: str
    model: type[ModelT]
    id_prefix: str = ""

    def __init__(self, store: KeyValueStore, clock: Clock = datetime.now):
        self.store = store
        self.clock = clock
        self._unparsed: list[Any] = []

    # -------------------------------------------------------------------------
    # Raw collection access
    # -------------------------------------------------------------------------

    def _load(self) -> list[ModelT]:
        """
        Read and validate the collection.

        Records that fail validation are left out of the result but kept
        in `_unparsed`, so the next save writes them back unchanged.
        """
        items = []
        self._unparsed = []
        for record in self.store.load_list(self.key):
            try:
                items.append(self.model.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid record in '{self.key}': {validation_message(e)}")
                self._unparsed.append(record)
        return items

    def _save(self, items: list[ModelT]):
        records = [item.model_dump(mode="json") for item in items]
        self.store.save(self.key, records + self._unparsed)

    def _new_id(self, items: list[ModelT]) -> str:
        """Millisecond timestamp ID, bumped until unique in the collection."""
        taken = {item.id for item in items}
        taken.update(r.get("id") for r in self._unparsed if isinstance(r, dict))
        stamp = int(self.clock().timestamp() * 1000)
        while f"{self.id_prefix}{stamp}" in taken:
            stamp += 1
        return f"{self.id_prefix}{stamp}"

    def _validate(self, data: dict[str, Any]) -> ModelT:
        try:
            return self.model.model_validate(data)
        except ValidationError as e:
            raise InvalidInputError(validation_message(e)) from e

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def _prepare_new(self, data: dict[str, Any]) -> dict[str, Any]:
        """Adjust a new record before validation."""
        return data

    def _merge(self, current: ModelT, patch: BaseModel) -> dict[str, Any]:
        """Overlay the fields set on patch onto the current record."""
        merged = current.model_dump()
        merged.update(patch.model_dump(exclude_unset=True))
        return merged

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    def all(self) -> list[ModelT]:
        return self._load()

    def get(self, item_id: str) -> Optional[ModelT]:
        return next((item for item in self._load() if item.id == item_id), None)

    def add(self, data: BaseModel | dict[str, Any]) -> ModelT:
        """
        Append a new record with a generated ID.

        Raises:
            InvalidInputError: If the record fails validation
        """
        if isinstance(data, BaseModel):
            data = data.model_dump()
        items = self._load()
        record = self._prepare_new({**data, "id": self._new_id(items)})
        item = self._validate(record)
        items.append(item)
        self._save(items)
        logger.info(f"Added {self.model.__name__} {item.id}")
        return item

    def update(self, item_id: str, patch: BaseModel) -> Optional[ModelT]:
        """
        Apply a partial update.

        Returns:
            The updated record, or None if no record has this ID

        Raises:
            InvalidInputError: If the merged record fails validation
        """
        items = self._load()
        for index, item in enumerate(items):
            if item.id == item_id:
                updated = self._validate(self._merge(item, patch))
                items[index] = updated
                self._save(items)
                return updated
        return None

    def delete(self, item_id: str) -> bool:
        items = self._load()
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            return False
        self._save(remaining)
        logger.info(f"Deleted {self.model.__name__} {item_id}")
        return True
