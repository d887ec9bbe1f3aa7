"""
Storage utility.

Key-value persistence for the catalog collections. Each key holds one
serialized collection (products, reviews, favorites).
"""

import json
import logging
import os
import shutil
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageManager:
    """
    File-backed key-value store.

    Handles:
    - One file per key (data/<key>.json)
    - Atomic writes (temp file + rename) with a one-level backup
    """

    def __init__(self, data_root: str):
        """
        Initialize storage manager.

        Args:
            data_root: Root data directory (e.g., /path/to/data)
        """
        self.data_root = str(data_root)

        # Create directory if it doesn't exist
        os.makedirs(self.data_root, exist_ok=True)

        logger.info(f"Initialized StorageManager with data_root={self.data_root}")

    def _path(self, key: str) -> str:
        return os.path.join(self.data_root, f"{key}.json")

    def read(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under a key.

        Args:
            key: Collection namespace (e.g., "merchio_products")

        Returns:
            Stored text, or None if nothing has been written yet
        """
        filepath = self._path(key)

        if not os.path.exists(filepath):
            logger.debug(f"No stored value for {key}")
            return None

        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()

    def write(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        The previous value is kept as <key>.json.backup.

        Args:
            key: Collection namespace
            value: Serialized collection
        """
        filepath = self._path(key)

        if os.path.exists(filepath):
            backup_path = f"{filepath}.backup"
            shutil.copy(filepath, backup_path)
            logger.debug(f"Created backup: {backup_path}")

        temp_path = f"{filepath}.tmp"
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                f.write(value)

            os.replace(temp_path, filepath)
            logger.debug(f"Saved {key} to {filepath}")

        except OSError as e:
            logger.error(f"Failed to save {key}: {e}")
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    def restore_backup(self, key: str) -> Optional[str]:
        """
        Replace a corrupted value with its backup copy.

        Args:
            key: Collection namespace

        Returns:
            Restored text, or None if there is no readable backup
        """
        filepath = self._path(key)
        backup_path = f"{filepath}.backup"

        if not os.path.exists(backup_path):
            logger.warning(f"No backup file found for {key}")
            return None

        logger.warning(f"Attempting to restore {key} from backup: {backup_path}")
        try:
            with open(backup_path, "r", encoding="utf-8") as f:
                value = f.read()
            shutil.copy(backup_path, filepath)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Backup restoration failed for {key}: {e}")
            return None

        logger.info(f"Restored {key} from backup")
        return value


class InMemoryStorage:
    """Dict-backed store with the same read/write contract as StorageManager."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value


def _decode_list(key: str, raw: str) -> Optional[list]:
    """Parse stored text as a JSON list; None when it is not one."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse {key} JSON: {e}")
        return None

    if not isinstance(data, list):
        logger.error(f"Expected a list under {key}, got {type(data).__name__}")
        return None
    return data


def _restore_from_backup(storage, key: str) -> list:
    """Decode the backup copy of a corrupted collection, or fall back to empty."""
    restore = getattr(storage, "restore_backup", None)
    if restore is None:
        logger.warning(f"No backup available for {key}. Treating as empty collection.")
        return []

    raw = restore(key)
    data = _decode_list(key, raw) if raw is not None else None
    if data is None:
        logger.warning(f"Could not recover {key}. Treating as empty collection.")
        return []
    return data


def read_collection(
    storage,
    key: str,
    from_dict: Callable[[dict], T]
) -> Optional[List[T]]:
    """
    Decode the collection stored under a key.

    Args:
        storage: Any object with read(key) -> Optional[str]; if it also has
            restore_backup(key) -> Optional[str], corrupted data is recovered
            from the backup copy
        key: Collection namespace
        from_dict: Record constructor (e.g., Product.from_dict)

    Returns:
        List of records, or None if the key has never been written.
        Unrecoverable data yields an empty list; invalid records are skipped.
    """
    try:
        raw = storage.read(key)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {key}: {e}")
        data = _restore_from_backup(storage, key)
    else:
        if raw is None:
            return None
        data = _decode_list(key, raw)
        if data is None:
            data = _restore_from_backup(storage, key)

    records = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object record #{index} in {key}")
            continue
        try:
            records.append(from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid record #{index} in {key}: {e}")

    logger.debug(f"Loaded {len(records)} records from {key}")
    return records


def write_collection(storage, key: str, records: Iterable) -> None:
    """Serialize records (anything with to_dict()) and store them under a key."""
    data = [record.to_dict() for record in records]
    storage.write(key, json.dumps(data, indent=2, ensure_ascii=False))


# Design Rationale and Trade-offs:
#
# 1. A never-written key reads as None, corrupted data as a list
#    - None triggers seeding; [] never does
#    - Trade-off: callers must distinguish the two
#
# 2. Corrupted collections are restored from <key>.json.backup first
#    - The backup is the value before the last write
#    - Only stores with restore_backup (StorageManager) can recover
#    - Trade-off: the last write is lost when the restored backup is used
#
# 3. Invalid records are skipped one at a time
#    - Type and range checks live in the model __post_init__
#    - Trade-off: skipped records disappear on the next write
#
# 4. Writes go to a temp file and os.replace, and errors propagate
#    - A failed write never truncates the previous value
#    - Trade-off: read errors degrade, write errors raise
