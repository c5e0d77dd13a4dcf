from typing import Any, Dict, List, Tuple
from math import ceil

from sqlalchemy.orm import Query


def paginate(page: int, limit: int, total: int) -> Dict[str, Any]:
    """
    Build pagination metadata for list responses
    """
    total_pages = ceil(total / limit) if limit > 0 else 0

    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total,
        "itemsPerPage": limit,
        "hasNext": page < total_pages,
        "hasPrev": page > 1
    }


def paginate_query(query: Query, page: int, limit: int) -> Tuple[List[Any], Dict[str, Any]]:
    """Run an ordered query for one page and return (items, pagination)"""
    total = query.count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, paginate(page, limit, total)
