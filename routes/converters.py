from werkzeug.routing import IntegerConverter

from schemas import MAX_ID


class IdConverter(IntegerConverter):
    """`<id:...>` URL segment: a positive integer that fits an INTEGER primary key.
    Anything outside that range does not match the route, so the client gets a 404."""

    def __init__(self, map, *args, **kwargs):
        kwargs.setdefault("min", 1)
        kwargs.setdefault("max", MAX_ID)
        super().__init__(map, *args, **kwargs)
