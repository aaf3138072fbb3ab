"""In-memory stand-ins for the Motor database and GridFS bucket used in tests."""

from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from bson import ObjectId
from gridfs.errors import NoFile
from pymongo.errors import ServerSelectionTimeoutError


def _matches(doc: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, expected in query.items():
        value = doc.get(key)
        if isinstance(expected, dict):
            if "$ne" in expected and value == expected["$ne"]:
                return False
            if "$in" in expected and value not in expected["$in"]:
                return False
        elif value != expected:
            return False
    return True


def _project(doc: Dict[str, Any], projection: Optional[Dict[str, int]]) -> Dict[str, Any]:
    doc = copy.deepcopy(doc)
    if not projection:
        return doc
    included = [k for k, v in projection.items() if v and k != "_id"]
    if included:
        keep = set(included) | {"_id"}
        doc = {k: v for k, v in doc.items() if k in keep}
    if projection.get("_id") == 0:
        doc.pop("_id", None)
    return doc


class FakeCursor:
    def __init__(self, collection: "FakeCollection", docs: List[Dict[str, Any]]) -> None:
        self._collection = collection
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs.sort(key=lambda d: (d.get(key) is not None, d.get(key)), reverse=direction < 0)
        return self

    def skip(self, count: int) -> "FakeCursor":
        self._docs = self._docs[count:]
        return self

    def limit(self, count: int) -> "FakeCursor":
        if count:
            self._docs = self._docs[:count]
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        self._collection._maybe_fail()
        return self._docs if length is None else self._docs[:length]


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: List[Dict[str, Any]] = []
        self.fail = False
        self.indexes: List[Any] = []

    def _maybe_fail(self) -> None:
        if self.fail:
            raise ServerSelectionTimeoutError(f"{self.name}: no servers available")

    def find(self, query: Optional[Dict[str, Any]] = None, projection: Optional[Dict[str, int]] = None) -> FakeCursor:
        query = query or {}
        return FakeCursor(self, [_project(d, projection) for d in self.docs if _matches(d, query)])

    async def find_one(self, query: Dict[str, Any], projection: Optional[Dict[str, int]] = None) -> Optional[Dict[str, Any]]:
        self._maybe_fail()
        for doc in self.docs:
            if _matches(doc, query):
                return _project(doc, projection)
        return None

    async def insert_one(self, doc: Dict[str, Any]) -> SimpleNamespace:
        self._maybe_fail()
        doc.setdefault("_id", ObjectId())
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]) -> SimpleNamespace:
        self._maybe_fail()
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def create_index(self, keys: Any, **kwargs: Any) -> str:
        self.indexes.append((keys, kwargs))
        return str(keys)


class FakeDatabase:
    """Collections are created on first access, like Motor."""

    def __init__(self) -> None:
        self._collections: Dict[str, FakeCollection] = {}
        self.fail_ping = False

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]

    def __getattr__(self, name: str) -> FakeCollection:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    async def command(self, name: str) -> Dict[str, Any]:
        if self.fail_ping:
            raise ServerSelectionTimeoutError("no servers available")
        return {"ok": 1.0}


class FakeGridOut:
    def __init__(self, data: bytes, metadata: Optional[Dict[str, Any]]) -> None:
        self.metadata = metadata
        self._chunks = [data[i:i + 4] for i in range(0, len(data), 4)]

    async def readchunk(self) -> bytes:
        return self._chunks.pop(0) if self._chunks else b""


class FakeBucket:
    def __init__(self) -> None:
        self.files: Dict[str, Dict[str, Any]] = {}
        self.fail = False

    async def upload_from_stream(self, filename: str, source: bytes, metadata: Optional[Dict[str, Any]] = None) -> ObjectId:
        if self.fail:
            raise ServerSelectionTimeoutError("no servers available")
        self.files[filename] = {"data": bytes(source), "metadata": metadata}
        return ObjectId()

    async def open_download_stream_by_name(self, filename: str) -> FakeGridOut:
        if filename not in self.files:
            raise NoFile(f"no file named {filename}")
        stored = self.files[filename]
        return FakeGridOut(stored["data"], stored["metadata"])
