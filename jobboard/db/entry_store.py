"""
Entry store: durable CRUD plus atomic batch position/status updates.

Every operation is scoped to an owner id supplied by the caller's identity
provider. Entries of other owners behave exactly like missing entries.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from jobboard.db.entries_reader import get_connection, query_entries_by_owner, query_entry
from jobboard.db.entries_writer import EntriesWriter
from jobboard.db.schema import init_database
from jobboard.models.errors import (
    InvalidTargetError,
    create_not_found_error,
    create_validation_error,
)
from jobboard.models.status import ApplicationStatus, parse_status
from jobboard.schemas.entry import EntryCreate, EntryRecord, EntryUpdate, PositionUpdate
from jobboard.utils.pydantic_error_mapper import map_pydantic_validation_error
from jobboard.utils.validation import (
    get_current_utc_timestamp,
    validate_entry_id,
    validate_owner_id,
    validate_position,
    validate_unique_entry_ids,
)

logger = logging.getLogger(__name__)


def to_entry_schema(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a database row to the fixed entry output schema."""
    return EntryRecord.model_validate(dict(row)).model_dump()


def coerce_position_update(item: Union[PositionUpdate, Mapping[str, Any]], index: int) -> PositionUpdate:
    """
    Validate one batch item and return it as a PositionUpdate.

    Args:
        item: A PositionUpdate or a ``{id, position, status?}`` mapping
        index: Position of the item in the batch, for error messages

    Returns:
        The validated PositionUpdate

    Raises:
        ValidationError: If the item shape, id or position is invalid
        InvalidTargetError: If the status is not a known stage
    """
    if isinstance(item, PositionUpdate):
        return item

    if not isinstance(item, Mapping):
        raise create_validation_error(f"Update item at index {index} is not an object", field="updates")

    for required in ("id", "position"):
        if required not in item:
            raise create_validation_error(
                f"Update item at index {index} is missing required field: '{required}'",
                field="updates",
            )

    unknown = sorted(set(item) - {"id", "position", "status"})
    if unknown:
        raise create_validation_error(
            f"Update item at index {index} has unknown fields: {', '.join(unknown)}",
            field="updates",
        )

    entry_id = validate_entry_id(item["id"])
    position = validate_position(item["position"])
    status = item.get("status")
    return PositionUpdate(
        id=entry_id,
        position=position,
        status=parse_status(status) if status is not None else None,
    )


class EntryStore:
    """SQLite-backed store for application entries."""

    def __init__(self, db_path: Optional[str] = None):
        """Resolve the database path and bootstrap the schema if needed."""
        self.db_path = str(init_database(db_path))

    def _validate(self, model, attributes):
        if isinstance(attributes, model):
            return attributes
        if not isinstance(attributes, Mapping):
            raise create_validation_error(
                f"Invalid attributes type: expected object, got {type(attributes).__name__}"
            )
        try:
            return model.model_validate(dict(attributes))
        except PydanticValidationError as e:
            raise map_pydantic_validation_error(e) from e

    def create(
        self,
        owner_id: str,
        attributes: Union[EntryCreate, Mapping[str, Any]],
        status=None,
    ) -> Dict[str, Any]:
        """
        Create an entry at the end of its (owner, status) partition.

        Args:
            owner_id: Owner of the new entry
            attributes: Descriptive attributes (company_name, title,
                applied_date, job_url, notes, optionally status)
            status: Initial stage; overrides attributes["status"]. Defaults
                to ``applied``.

        Returns:
            The stored entry

        Raises:
            ValidationError: If attributes are missing or invalid
            PersistenceError: If the insert fails
        """
        owner_id = validate_owner_id(owner_id)
        payload = self._validate(EntryCreate, attributes)
        stage = _resolve_create_status(payload, status)
        values = payload.model_dump()

        with EntriesWriter(self.db_path) as writer:
            position = writer.next_position(owner_id, stage)
            entry_id = writer.insert_entry(
                owner_id, values, stage, position, get_current_utc_timestamp()
            )
            row = writer.fetch_entry(owner_id, entry_id)
            writer.commit()

        logger.info("Created entry %s for owner %s in %s at position %s", entry_id, owner_id, stage.value, position)
        return to_entry_schema(row)

    def get(self, owner_id: str, entry_id: int) -> Dict[str, Any]:
        """
        Fetch one entry.

        Raises:
            NotFoundError: If the entry is missing or owned by someone else
        """
        owner_id = validate_owner_id(owner_id)
        entry_id = validate_entry_id(entry_id)
        with get_connection(self.db_path) as conn:
            row = query_entry(conn, owner_id, entry_id)
        if row is None:
            raise create_not_found_error(entry_id)
        return to_entry_schema(row)

    def update(
        self,
        owner_id: str,
        entry_id: int,
        attributes: Union[EntryUpdate, Mapping[str, Any]],
    ) -> Dict[str, Any]:
        """
        Apply a partial attribute update.

        Fields that are not supplied are left unchanged. A stage change
        appends the entry to the end of its new partition; the old
        partition is not renumbered.

        Returns:
            The updated entry

        Raises:
            ValidationError: If a supplied attribute is invalid
            NotFoundError: If the entry is missing or owned by someone else
            PersistenceError: If the update fails
        """
        owner_id = validate_owner_id(owner_id)
        entry_id = validate_entry_id(entry_id)
        changes = self._validate(EntryUpdate, attributes).changes()

        with EntriesWriter(self.db_path) as writer:
            current = writer.fetch_entry(owner_id, entry_id)
            if current is None:
                raise create_not_found_error(entry_id)

            if "status" in changes and changes["status"] == current["status"]:
                del changes["status"]

            if "status" in changes:
                changes["position"] = writer.next_position(
                    owner_id, ApplicationStatus(changes["status"])
                )

            if changes:
                writer.update_entry_fields(
                    owner_id, entry_id, changes, get_current_utc_timestamp()
                )
                current = writer.fetch_entry(owner_id, entry_id)
            writer.commit()

        return to_entry_schema(current)

    def batch_update_positions(
        self,
        owner_id: str,
        updates: Iterable[Union[PositionUpdate, Mapping[str, Any]]],
    ) -> int:
        """
        Apply ``{id, position, status?}`` updates as one atomic batch.

        Items whose id does not exist or belongs to another owner are
        skipped silently. All items are validated before the first write,
        and the writes share one transaction: either every owned update is
        persisted or none is.

        Args:
            owner_id: Owner the updated entries must belong to
            updates: PositionUpdate objects or equivalent mappings

        Returns:
            Number of entries updated

        Raises:
            ValidationError: If an item is malformed or ids repeat
            InvalidTargetError: If an item names an unknown stage
            PersistenceError: If the batch fails (nothing is persisted)
        """
        owner_id = validate_owner_id(owner_id)
        if updates is None or isinstance(updates, (str, bytes, Mapping)):
            raise create_validation_error("Invalid updates: expected a list of items", field="updates")

        items = [coerce_position_update(item, index) for index, item in enumerate(updates)]
        if not items:
            return 0
        validate_unique_entry_ids(items)

        updated = 0
        with EntriesWriter(self.db_path) as writer:
            owned = writer.filter_owned_ids(owner_id, [item.id for item in items])
            skipped = [item.id for item in items if item.id not in owned]
            if skipped:
                logger.debug("Skipping ids not owned by %s: %s", owner_id, skipped)

            timestamp = get_current_utc_timestamp()
            for item in items:
                if item.id not in owned:
                    continue
                updated += writer.update_entry_position(
                    owner_id, item.id, item.position, item.status, timestamp
                )
            writer.commit()

        logger.info("Applied %d of %d position updates for owner %s", updated, len(items), owner_id)
        return updated

    def set_archived(self, owner_id: str, entry_id: int, archived: bool) -> Dict[str, Any]:
        """
        Archive or unarchive an entry. Position is never altered.

        Raises:
            ValidationError: If archived is not a boolean
            NotFoundError: If the entry is missing or owned by someone else
        """
        owner_id = validate_owner_id(owner_id)
        entry_id = validate_entry_id(entry_id)
        if not isinstance(archived, bool):
            raise create_validation_error(
                f"Invalid archived type: expected boolean, got {type(archived).__name__}",
                field="archived",
            )

        with EntriesWriter(self.db_path) as writer:
            if writer.set_archived(owner_id, entry_id, archived, get_current_utc_timestamp()) == 0:
                raise create_not_found_error(entry_id)
            row = writer.fetch_entry(owner_id, entry_id)
            writer.commit()

        return to_entry_schema(row)

    def delete(self, owner_id: str, entry_id: int) -> None:
        """
        Permanently delete an entry. Siblings keep their positions.

        Raises:
            NotFoundError: If the entry is missing or owned by someone else
        """
        owner_id = validate_owner_id(owner_id)
        entry_id = validate_entry_id(entry_id)

        with EntriesWriter(self.db_path) as writer:
            if writer.delete_entry(owner_id, entry_id) == 0:
                raise create_not_found_error(entry_id)
            writer.commit()

        logger.info("Deleted entry %s for owner %s", entry_id, owner_id)

    def list_by_owner(self, owner_id: str, include_archived: bool = False) -> List[Dict[str, Any]]:
        """
        List an owner's entries for grouping and ordering.

        The result is unsorted by contract; callers sort by position.
        """
        owner_id = validate_owner_id(owner_id)
        with get_connection(self.db_path) as conn:
            rows = query_entries_by_owner(conn, owner_id, include_archived=include_archived)
        return [to_entry_schema(row) for row in rows]


def _resolve_create_status(payload: EntryCreate, status) -> ApplicationStatus:
    if status is None:
        return payload.resolved_status
    try:
        return parse_status(status)
    except InvalidTargetError as e:
        # On a create form an unknown stage is a field error, not a move target
        raise create_validation_error(e.message, field="status") from e
