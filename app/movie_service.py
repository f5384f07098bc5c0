"""This module serves as a service layer for the movie collection, providing
functions to list, filter, create, update and delete movie documents.
Every function receives the collection it works on; nothing here holds a
connection of its own.
app.movie_service.py
"""
from bson import ObjectId
from bson.errors import InvalidId
from fastapi.encoders import jsonable_encoder
from pymongo import ASCENDING
from pymongo.errors import OperationFailure


def serialize_documents(docs):
    return jsonable_encoder(list(docs), custom_encoder={ObjectId: str})

def parse_object_id(value):
    if value is None:
        raise InvalidId("an _id must be informed")
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidId(f"'{value}' is not a valid ObjectId, it must be a 24-character hex string")
    return ObjectId(value)

def store_error_payload(exc):
    if isinstance(exc, OperationFailure):
        details = exc.details or {}
        payload = {key: details[key] for key in ("ok", "errmsg", "code", "codeName") if key in details}
        return payload or {"ok": 0, "code": exc.code, "errmsg": str(exc)}
    return {"name": type(exc).__name__, "errmsg": str(exc)}


def list_movies(collection):
    cursor = collection.find({}, projection={"senha": False}).sort("nome", ASCENDING)
    return serialize_documents(cursor)

def find_by_user_id(collection, user_id: str):
    return serialize_documents(collection.find({"user_id": {"$eq": user_id}}))

def find_by_razao(collection, razao: str):
    return serialize_documents(
        collection.find({"razao_social": {"$regex": razao, "$options": "i"}})
    )

def create_movie_doc(collection, doc):
    result = collection.insert_one(doc)
    return {"acknowledged": result.acknowledged, "insertedId": str(result.inserted_id)}

def update_movie_doc(collection, movie_id, fields):
    oid = parse_object_id(movie_id)
    result = collection.update_one({"_id": {"$eq": oid}}, {"$set": fields})
    upserted_id = result.upserted_id
    return {
        "acknowledged": result.acknowledged,
        "matchedCount": result.matched_count,
        "modifiedCount": result.modified_count,
        "upsertedCount": 0 if upserted_id is None else 1,
        "upsertedId": None if upserted_id is None else str(upserted_id),
    }

def delete_movie_doc(collection, movie_id):
    oid = parse_object_id(movie_id)
    result = collection.delete_one({"_id": {"$eq": oid}})
    return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}
