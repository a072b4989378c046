# storage.py
import asyncio
import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from errors import StorageInitError, StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)

Task = Dict[str, Any]


def reject_constant(name: str):
    """`parse_constant` hook: NaN and Infinity are not JSON."""
    raise ValueError(f"{name} is not valid JSON")


def _parse_tasks(raw: str) -> List[Task]:
    """Parses a document and checks it is a list of task objects. Raises ValueError otherwise."""
    tasks = json.loads(raw, parse_constant=reject_constant)
    if not isinstance(tasks, list):
        raise ValueError(f"expected a JSON array of tasks, got {type(tasks).__name__}")
    for position, task in enumerate(tasks):
        if not isinstance(task, dict):
            raise ValueError(f"entry {position} is not a JSON object")
    return tasks


def _serialize_tasks(tasks: List[Task]) -> str:
    return json.dumps(tasks, indent=2, ensure_ascii=False, allow_nan=False)


class TaskStore:
    """
    Persists the whole task collection as one unit.
    Every call reads or overwrites the full collection; there is no caching and no locking
    between a load and the following save, so concurrent writers can lose updates.
    """

    async def initialize(self) -> None:
        raise NotImplementedError

    async def load(self) -> List[Task]:
        raise NotImplementedError

    async def save(self, tasks: List[Task]) -> None:
        raise NotImplementedError


class JsonFileStore(TaskStore):
    """Stores the collection as a pretty-printed JSON array in a single file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def data_dir(self) -> Path:
        return self.path.parent

    # --- Blocking helpers, run in a worker thread ---
    def _initialize_sync(self) -> None:
        if not self.data_dir.is_dir():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logger.info("Data directory created: %s", self.data_dir)

        if not self.path.exists():
            self._write_sync([])
            logger.info("Tasks file created: %s", self.path)

        # Verify the document is readable and well formed
        _parse_tasks(self.path.read_text(encoding="utf-8"))

    def _read_sync(self) -> List[Task]:
        return _parse_tasks(self.path.read_text(encoding="utf-8"))

    def _write_sync(self, tasks: List[Task]) -> None:
        # Write to a temp file next to the document, then rename over it.
        data = _serialize_tasks(tasks)
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=".tmp.", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    # --- TaskStore ---
    async def initialize(self) -> None:
        try:
            await asyncio.to_thread(self._initialize_sync)
        except (OSError, ValueError) as e:
            logger.error("Database initialization failed: %s", e)
            raise StorageInitError(f"Cannot initialize {self.path}: {e}") from e
        logger.info("Database initialized successfully: %s", self.path)

    async def load(self) -> List[Task]:
        try:
            return await asyncio.to_thread(self._read_sync)
        except (OSError, ValueError) as e:
            logger.error("Error reading tasks from %s: %s", self.path, e)
            raise StorageReadError(str(e)) from e

    async def save(self, tasks: List[Task]) -> None:
        try:
            # Once handed to the thread, the write finishes even if the request is cancelled.
            await asyncio.shield(asyncio.to_thread(self._write_sync, tasks))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error writing tasks to %s: %s", self.path, e)
            raise StorageWriteError(str(e)) from e


class MemoryTaskStore(TaskStore):
    """Keeps the collection in memory. Copies on load and save so callers never share state with the store."""

    def __init__(self, tasks: List[Task] | None = None):
        self._tasks: List[Task] = copy.deepcopy(tasks) if tasks else []

    async def initialize(self) -> None:
        pass

    async def load(self) -> List[Task]:
        return copy.deepcopy(self._tasks)

    async def save(self, tasks: List[Task]) -> None:
        self._tasks = copy.deepcopy(tasks)
