"""
Registry Storage
================

Printer registry and client store, each persisted as one JSON document
(``{"printers": [...]}`` / ``{"clients": [...]}``) that is rewritten in full
on every mutation. Collections are re-read on every call; nothing is cached.

Read-modify-write is not locked: overlapping saves from concurrent requests
race and the last writer wins.
"""

import json
import logging
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

from .config import MAX_PRINTERS_PER_ROLE
from .exceptions import QuotaExceededError, PayloadInvalidError
from .models import PrinterRecord, ClientRecord

logger = logging.getLogger(__name__)


# =============================================================================
# Storage Backends
# =============================================================================

class JsonFileStorage:
    """One collection stored as ``{key: [...]}`` in a JSON file."""

    def __init__(self, path: Union[str, Path], key: str):
        self.path = Path(path)
        self.key = key

    def read(self) -> List[Dict[str, Any]]:
        """Load the collection; missing or corrupt files yield ``[]``."""
        try:
            if not self.path.exists():
                return []
            raw = self.path.read_text(encoding='utf-8').strip()
            if not raw:
                return []
            data = json.loads(raw)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load {self.path}: {e}")
            return []

        items = data.get(self.key) if isinstance(data, dict) else None
        if not isinstance(items, list):
            logger.warning(f"{self.path} has no '{self.key}' list, using empty collection")
            return []
        return items

    def write(self, items: List[Dict[str, Any]]) -> None:
        """Replace the stored collection."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump({self.key: items}, f, indent=2)


class MemoryStorage:
    """In-process storage with the same interface, for tests and demos."""

    def __init__(self, items: Optional[List[Dict[str, Any]]] = None):
        self._items = json.loads(json.dumps(items or []))
        self.writes = 0

    def read(self) -> List[Dict[str, Any]]:
        return json.loads(json.dumps(self._items))

    def write(self, items: List[Dict[str, Any]]) -> None:
        self._items = json.loads(json.dumps(items))
        self.writes += 1


# =============================================================================
# Printer Registry
# =============================================================================

class PrinterRegistry:
    """Printer records keyed by ``id``, with a per-role quota on creation."""

    def __init__(self, storage, max_per_role: int = MAX_PRINTERS_PER_ROLE):
        self.storage = storage
        self.max_per_role = max_per_role

    def list(self) -> List[PrinterRecord]:
        """All records in stored order. Malformed entries are skipped."""
        return self._parse(self.storage.read())

    def get(self, printer_id: str) -> Optional[PrinterRecord]:
        """Exact-id lookup, enabled or not."""
        for printer in self.list():
            if printer.id == printer_id:
                return printer
        return None

    def find_enabled(self, key: str) -> Optional[PrinterRecord]:
        """
        Resolve an enabled printer by id (case-insensitive), falling back
        to an exact match on name.
        """
        if not key:
            return None
        enabled = [p for p in self.list() if p.enabled]
        for printer in enabled:
            if printer.matches(key):
                return printer
        for printer in enabled:
            if printer.name == key:
                return printer
        return None

    def save(self, record: PrinterRecord) -> PrinterRecord:
        """
        Upsert by id. Replacing an existing id skips the quota check.
        Other stored entries, parseable or not, are written back untouched.

        Raises:
            QuotaExceededError: new id and the role already has
                ``max_per_role`` enabled printers (nothing is written)
        """
        items = self.storage.read()

        for index, item in enumerate(items):
            if _stored_id(item) == record.id:
                items[index] = record.to_dict()
                self.storage.write(items)
                logger.info(f"Updated printer {record.id}")
                return record

        in_role = sum(1 for p in self._parse(items) if p.enabled and p.role == record.role)
        if in_role >= self.max_per_role:
            logger.warning(f"Rejected printer {record.id}: role {record.role} "
                           f"already has {in_role} enabled printer(s)")
            raise QuotaExceededError(record.role, self.max_per_role)

        items.append(record.to_dict())
        self.storage.write(items)
        logger.info(f"Added printer {record.id} ({record.role})")
        return record

    def delete(self, printer_id: str) -> None:
        """Remove the entries with this id. Unknown ids are ignored."""
        items = self.storage.read()
        remaining = [item for item in items if _stored_id(item) != printer_id]
        if len(remaining) != len(items):
            self.storage.write(remaining)
            logger.info(f"Deleted printer {printer_id}")

    @staticmethod
    def _parse(items: List[Any]) -> List[PrinterRecord]:
        printers = []
        for item in items:
            try:
                printers.append(PrinterRecord.from_dict(item))
            except PayloadInvalidError as e:
                logger.warning(f"Skipping stored printer {item!r}: {e.message}")
        return printers


def _stored_id(item: Any) -> Optional[str]:
    """Id of a raw stored entry, as ``PrinterRecord.from_dict`` would read it."""
    if isinstance(item, dict) and isinstance(item.get('id'), str):
        return item['id'].strip()
    return None


# =============================================================================
# Client Store
# =============================================================================

class ClientStore:
    """Registered client devices. Records are never updated in place."""

    def __init__(self, storage):
        self.storage = storage

    def list(self) -> List[ClientRecord]:
        clients = []
        for item in self.storage.read():
            try:
                clients.append(ClientRecord.from_dict(item))
            except (PayloadInvalidError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed client record: {e}")
        return clients

    def get(self, client_id: str) -> Optional[ClientRecord]:
        for client in self.list():
            if client.id == client_id:
                return client
        return None

    def register(self) -> ClientRecord:
        """Mint a new client id and pin and persist them."""
        taken = {c.id for c in self.list()}

        client = ClientRecord()
        while client.id in taken:
            client = ClientRecord()

        items = self.storage.read()
        items.append(client.to_dict())
        self.storage.write(items)
        logger.info(f"Registered client {client.id}")
        return client
