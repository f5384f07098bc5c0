import copy
import re
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from app.main import app, get_collection


def _matches_condition(value, condition):
    if isinstance(condition, dict) and any(key.startswith("$") for key in condition):
        for op, arg in condition.items():
            if op == "$eq":
                if value != arg:
                    return False
            elif op == "$regex":
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                if not isinstance(value, str) or not re.search(arg, value, flags):
                    return False
            elif op == "$options":
                continue
            else:
                raise NotImplementedError(op)
        return True
    return value == condition


def _matches(doc, query):
    return all(_matches_condition(doc.get(field), cond) for field, cond in query.items())


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def sort(self, key, direction=1):
        self._docs.sort(key=lambda d: (d.get(key) is None, d.get(key) or ""), reverse=direction == -1)
        return self

    def __iter__(self):
        return iter(self._docs)


class FakeCollection:
    """In-memory stand-in for the subset of pymongo's Collection used by the app."""

    full_name = "filmes_db.filmes"

    def __init__(self, docs=None):
        self.docs = []
        for doc in docs or []:
            self.insert_one(doc)

    def find(self, filter=None, projection=None):
        excluded = {k for k, v in (projection or {}).items() if not v}
        found = []
        for doc in self.docs:
            if _matches(doc, filter or {}):
                found.append({k: copy.deepcopy(v) for k, v in doc.items() if k not in excluded})
        return FakeCursor(found)

    def find_one(self, filter=None):
        return next(iter(self.find(filter)), None)

    def insert_one(self, doc):
        if "_id" not in doc:
            doc["_id"] = ObjectId()
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(acknowledged=True, inserted_id=doc["_id"])

    def update_one(self, filter, update):
        for doc in self.docs:
            if _matches(doc, filter):
                changes = update["$set"]
                modified = any(doc.get(k) != v for k, v in changes.items())
                doc.update(copy.deepcopy(changes))
                return SimpleNamespace(acknowledged=True, matched_count=1, modified_count=int(modified), upserted_id=None)
        return SimpleNamespace(acknowledged=True, matched_count=0, modified_count=0, upserted_id=None)

    def delete_one(self, filter):
        for i, doc in enumerate(self.docs):
            if _matches(doc, filter):
                del self.docs[i]
                return SimpleNamespace(acknowledged=True, deleted_count=1)
        return SimpleNamespace(acknowledged=True, deleted_count=0)


def movie_payload(**overrides):
    payload = {
        "genero": "Ação",
        "nome": "Matrix",
        "diretor": "Wachowski",
        "ano": "1999",
        "nota": "9",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def client(collection):
    app.dependency_overrides[get_collection] = lambda: collection
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
