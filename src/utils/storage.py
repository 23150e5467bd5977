"""
Key-value storage backends for persisted application state.

The state repository only needs ``get`` and ``set`` of opaque strings, so any
of these backends can be injected into it.

Typical usage:
    storage = FileStorage(Path.home() / ".redday")
    repository = StateRepository(storage)
"""
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from src.utils.dynamo import DynamoDBClient, SNAPSHOT_SK, create_state_pk


class KeyValueStorage(Protocol):
    """Opaque string storage keyed by a fixed identifier."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryStorage:
    """Process-local storage, mostly for tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set(self, key: str, value: str) -> None:
        self.items[key] = value


class FileStorage:
    """
    Stores each key as a UTF-8 file inside a directory.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)


class DynamoStorage:
    """
    Stores each key as one DynamoDB item with the value in ``payload``.
    """

    def __init__(self, dynamo: DynamoDBClient):
        self.dynamo = dynamo

    @staticmethod
    def _key(key: str) -> Dict[str, str]:
        return {"PK": create_state_pk(key), "SK": SNAPSHOT_SK}

    def get(self, key: str) -> Optional[str]:
        item = self.dynamo.get_item(self._key(key))
        if not item:
            return None
        return item.get("payload")

    def set(self, key: str, value: str) -> None:
        self.dynamo.put_item({**self._key(key), "payload": value})
