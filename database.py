"""
Database access for the storefront

A single MongoDB database selected by DATABASE_URL. Collections are named
after the lowercased schema class (Product -> "product", Order -> "order").
"""
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel
from pymongo import MongoClient

DEFAULT_DATABASE_URL = "mongodb://localhost:27017/f1marketplace"
DEFAULT_DATABASE_NAME = "f1marketplace"

DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

# MongoClient connects lazily, so importing this module never blocks on the server
client = MongoClient(DATABASE_URL)
db = client.get_default_database(default=DEFAULT_DATABASE_NAME)


def _to_dict(data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump()
    return dict(data)


def create_document(collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    """Insert one document and return it as stored (with its _id)."""
    doc = _to_dict(data)
    result = db[collection_name].insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


def get_documents(collection_name: str, filter_dict: Optional[Dict[str, Any]] = None, sort: Optional[List] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    cursor = db[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def replace_collection(collection_name: str, documents: List[Union[BaseModel, Dict[str, Any]]]) -> int:
    """Drop every document in a collection and insert the given ones.

    There is no transaction: if insert_many fails midway the collection keeps
    whatever was inserted before the failure.
    """
    collection = db[collection_name]
    if collection.count_documents({}) > 0:
        collection.delete_many({})
    docs = [_to_dict(d) for d in documents]
    if docs:
        collection.insert_many(docs)
    return len(docs)


def serialize_doc(doc: Dict[str, Any]):
    if not doc:
        return doc
    doc = dict(doc)
    # Products carry their own external "id", so the storage key stays under "_id"
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    for k, v in list(doc.items()):
        if isinstance(v, datetime):
            if v.tzinfo is None:
                v = v.replace(tzinfo=timezone.utc)
            doc[k] = v.isoformat()
    return doc
