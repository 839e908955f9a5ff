import asyncio
import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict

from providers.state_store import KeyLocks, StateLoadError, StateSaveError, StateStoring

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9!._-]")


class FileStateStore(StateStoring):
    """
    Stores every key as a JSON file in one directory.

    A file is written to a temporary name first and then moved into place, so
    a failed save leaves the previous record intact. Disk access runs in a
    worker thread and never blocks the event loop.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._locks = KeyLocks()

    def path_for(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE.sub('_', key)}.json"

    async def load(self, key: str) -> Dict[str, Any]:
        path = self.path_for(key)
        async with self._locks(key):
            try:
                values = await asyncio.to_thread(self._read, path)
            except (OSError, ValueError) as e:
                raise StateLoadError(key, str(e)) from e

        if not isinstance(values, dict):
            raise StateLoadError(key, "stored record is not an object")
        return values

    async def save(self, key: str, values: Dict[str, Any]) -> bool:
        path = self.path_for(key)
        async with self._locks(key):
            try:
                payload = json.dumps(values, ensure_ascii=False, indent=2)
            except (TypeError, ValueError) as e:
                raise StateSaveError(key, str(e)) from e

            try:
                await asyncio.to_thread(self._write, path, payload)
            except OSError as e:
                logger.error(f"Failed to write {path}: {e}")
                raise StateSaveError(key, str(e)) from e

        logger.debug(f"Saved state for {key} to {path}")
        return True

    async def delete(self, key: str) -> bool:
        path = self.path_for(key)
        async with self._locks(key):
            return await asyncio.to_thread(self._remove, path)

    @staticmethod
    def _read(path: Path) -> Any:
        if not path.exists():
            return {}
        with path.open("r", encoding="utf-8") as file:
            return json.load(file)

    def _write(self, path: Path, payload: str) -> None:
        temp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.directory, suffix=".tmp", delete=False
            ) as file:
                temp_name = file.name
                file.write(payload)
            os.replace(temp_name, path)
        except OSError:
            if temp_name and os.path.exists(temp_name):
                os.remove(temp_name)
            raise

    @staticmethod
    def _remove(path: Path) -> bool:
        if not path.exists():
            return False
        path.unlink()
        return True
