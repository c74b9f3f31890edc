"""
Reference expansion for documents that point at residents or service providers.

Documents store references as string ids; list endpoints return a small
summary of the referenced record under a nested key (e.g. ``resident``).
"""

from typing import Any, Dict, Iterable, List, Sequence

from pymongo.database import Database

from residential_api.db.mongo import to_object_id

RESIDENT_SUMMARY = ("name", "apartment")
PROVIDER_SUMMARY = ("name", "service_category")


def attach_refs(
    db: Database,
    docs: List[Dict[str, Any]],
    collection: str,
    key: str,
    target: str,
    fields: Sequence[str],
) -> List[Dict[str, Any]]:
    """Set doc[target] to a {id, *fields} summary of the document referenced by doc[key]."""
    ids = {d.get(key) for d in docs if d.get(key)}
    if not ids:
        for d in docs:
            d[target] = None
        return docs
    projection = {f: 1 for f in fields}
    found = {
        str(r["_id"]): r
        for r in db[collection].find({"_id": {"$in": [to_object_id(i) for i in ids]}}, projection)
    }
    for d in docs:
        ref = found.get(str(d.get(key))) if d.get(key) else None
        if ref is None:
            d[target] = None
        else:
            d[target] = {"id": str(ref["_id"]), **{f: ref.get(f) for f in fields}}
    return docs


def attach_residents(
    db: Database,
    docs: List[Dict[str, Any]],
    fields: Sequence[str] = RESIDENT_SUMMARY,
) -> List[Dict[str, Any]]:
    return attach_refs(db, docs, "residents", "resident_id", "resident", fields)


def attach_providers(
    db: Database,
    docs: List[Dict[str, Any]],
    fields: Sequence[str] = PROVIDER_SUMMARY,
) -> List[Dict[str, Any]]:
    return attach_refs(db, docs, "service_providers", "service_provider_id", "service_provider", fields)


def resident_ids_matching(db: Database, query: Dict[str, Any]) -> List[str]:
    """String ids of residents matching a filter (used for cross-collection search)."""
    return [str(r["_id"]) for r in db["residents"].find(query, {"_id": 1})]


def sum_field(docs: Iterable[Dict[str, Any]], field: str) -> float:
    return sum((d.get(field) or 0) for d in docs)
