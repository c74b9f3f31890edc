"""
Query helpers shared by the list endpoints: case-insensitive search,
sorting and page slicing over a pymongo collection.
"""

import math
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection

from residential_api.db.mongo import docs_with_id


def contains(value: str) -> Dict[str, Any]:
    """Case-insensitive substring match."""
    return {"$regex": re.escape(value), "$options": "i"}


def search_filter(search: Optional[str], fields: Sequence[str]) -> Dict[str, Any]:
    if not search:
        return {}
    return {"$or": [{f: contains(search)} for f in fields]}


def sort_spec(
    sort: Optional[str],
    order: Optional[str],
    default_order: str = "asc",
) -> List[Tuple[str, int]]:
    """Explicit sort field with order (default asc), else newest first."""
    if sort:
        direction = DESCENDING if (order or default_order) == "desc" else ASCENDING
        return [(sort, direction), ("_id", direction)]
    return [("created_at", DESCENDING), ("_id", DESCENDING)]


def paginate(
    col: Collection,
    query: Dict[str, Any],
    params,
    projection: Optional[Dict[str, Any]] = None,
    default_order: str = "asc",
) -> Tuple[List[Dict[str, Any]], int]:
    """Return one page of documents (with 'id') plus the total match count."""
    skip = (params.page - 1) * params.limit
    cursor = (
        col.find(query, projection)
        .sort(sort_spec(params.sort, params.order, default_order))
        .skip(skip)
        .limit(params.limit)
    )
    return docs_with_id(cursor), col.count_documents(query)


def pagination_meta(params, total: int) -> Dict[str, int]:
    return {
        "page": params.page,
        "limit": params.limit,
        "total": total,
        "pages": math.ceil(total / params.limit) if params.limit else 0,
    }
