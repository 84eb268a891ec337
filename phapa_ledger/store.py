"""
Record Store

Owns the ordered list of entries (newest first) and its one storage
slot. The list is loaded once at startup; every mutation notifies
subscribers, and the store returned by LedgerStore.open() subscribes
its own persist() so each change is written straight back.

Error policy:
- A missing or unparseable slot loads as an empty ledger (logged, not raised)
- A record that fails validation is skipped; the others still load
- A failed write raises StorageWriteError to whoever made the change
"""

import json
from collections.abc import Callable, Iterator, Sequence
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from phapa_ledger.logging_config import get_logger
from phapa_ledger.models.entry import Entry, EntryCategory, EntryKind
from phapa_ledger.services.storage import KeyValueStorageInterface, StorageReadError

logger = get_logger(__name__)

ChangeListener = Callable[[Sequence[Entry]], None]

_ENTRY_LIST = TypeAdapter(list[Entry])


class LedgerStore:
    """
    The in-memory ledger bound to a storage slot.

    Aggregation never reads the store directly; it is handed
    snapshot(), an immutable tuple of the current entries.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key: str,
        entries: Optional[Sequence[Entry]] = None,
    ):
        self._storage = storage
        self._key = key
        self._entries: list[Entry] = list(entries or [])
        self._listeners: list[ChangeListener] = []

    @classmethod
    def open(cls, storage: KeyValueStorageInterface, key: str) -> "LedgerStore":
        """Load the slot and persist automatically after every change."""
        store = cls(storage, key)
        store.load()
        store.subscribe(store.persist)
        return store

    @property
    def key(self) -> str:
        return self._key

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> list[Entry]:
        """
        Replace the in-memory list with the stored one.

        Returns the loaded entries. Anything unreadable counts as no data.
        """
        self._entries = self._read_slot()
        logger.info("ledger_loaded", key=self._key, entry_count=len(self._entries))
        return list(self._entries)

    def _read_slot(self) -> list[Entry]:
        try:
            raw = self._storage.get_item(self._key)
        except StorageReadError as e:
            logger.warning("ledger_load_failed", key=self._key, reason="storage", error=str(e))
            return []

        if raw is None:
            return []

        try:
            records = json.loads(raw, parse_float=Decimal)
        except json.JSONDecodeError as e:
            logger.warning("ledger_load_failed", key=self._key, reason="payload", error=str(e))
            return []
        if not isinstance(records, list):
            logger.warning("ledger_load_failed", key=self._key, reason="shape")
            return []

        # One unreadable record must not cost the rest of the ledger
        entries = []
        for index, record in enumerate(records):
            try:
                entries.append(Entry.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    "ledger_record_skipped",
                    key=self._key,
                    index=index,
                    error_count=e.error_count(),
                )
        return entries

    def persist(self, entries: Optional[Sequence[Entry]] = None) -> None:
        """
        Write the full list to the slot, newest first.

        Raises:
            StorageWriteError: If the backend refuses the write
        """
        entries = self._entries if entries is None else list(entries)
        payload = _ENTRY_LIST.dump_json(list(entries)).decode("utf-8")
        self._storage.set_item(self._key, payload)
        logger.debug("ledger_persisted", key=self._key, entry_count=len(entries))

    # -------------------------------------------------------------------------
    # Change notification
    # -------------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """
        Call listener with the new snapshot after every change.

        Returns a function that removes the subscription.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, entry: Entry) -> Entry:
        """
        Prepend an entry.

        Raises:
            ValueError: If an entry with the same id is already stored
        """
        if any(existing.id == entry.id for existing in self._entries):
            raise ValueError(f"Entry {entry.id} already exists")
        self._entries.insert(0, entry)
        logger.info(
            "entry_added",
            entry_id=str(entry.id),
            kind=entry.kind.value,
            category=entry.category.value if entry.category else None,
            amount=str(entry.amount),
        )
        self._notify()
        return entry

    def create(
        self,
        kind: EntryKind,
        title: str,
        amount: Decimal,
        category: Optional[EntryCategory] = None,
        note: Optional[str] = None,
        receipt_image: Optional[str] = None,
    ) -> Entry:
        """Build an entry with a fresh id and today's date, then add it."""
        entry = Entry.new(
            kind=kind,
            title=title,
            amount=amount,
            category=category,
            note=note,
            receipt_image=receipt_image,
        )
        return self.add(entry)

    def remove(self, entry_id: Union[UUID, str]) -> bool:
        """
        Delete the entry with this id.

        Returns False, and changes nothing, when no entry matches.
        """
        try:
            target = entry_id if isinstance(entry_id, UUID) else UUID(str(entry_id))
        except ValueError:
            return False

        remaining = [entry for entry in self._entries if entry.id != target]
        if len(remaining) == len(self._entries):
            return False

        self._entries = remaining
        logger.info("entry_removed", entry_id=str(target))
        self._notify()
        return True

    def clear(self) -> None:
        """Remove every entry."""
        if not self._entries:
            return
        count = len(self._entries)
        self._entries = []
        logger.info("ledger_cleared", removed_count=count)
        self._notify()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def snapshot(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    def get(self, entry_id: UUID) -> Optional[Entry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.snapshot())
