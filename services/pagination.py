import math


def paginate(query, page, limit):
    """Returns (items, pagination) for an already ordered Model.query."""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    total_pages = math.ceil(total / limit) if limit else 0

    return items, {
        "currentPage": page,
        "totalPages": total_pages,
        "limit": limit,
        "total": total,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }


def page_payload(key, items, pagination):
    """Builds the {<key>: [...], pagination: {...}} body, naming the total after the resource."""
    meta = dict(pagination)
    meta["total" + key[:1].upper() + key[1:]] = meta.pop("total")
    return {key: items, "pagination": meta}
