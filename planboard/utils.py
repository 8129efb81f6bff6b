import os
import re
import threading
import time
from typing import List, Tuple

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"
_OBJECT_ID_RE = re.compile(OBJECT_ID_PATTERN)

_PROCESS_TAG = os.urandom(5)
_counter_lock = threading.Lock()
_counter = int.from_bytes(os.urandom(3), "big")


def new_object_id() -> str:
    """Return a 24 character hex id: 4 byte timestamp, 5 byte process tag, 3 byte counter.

    Ids generated within one process sort in creation order until the counter wraps.
    """
    global _counter
    with _counter_lock:
        _counter = (_counter + 1) % 0x1000000
        count = _counter
    raw = int(time.time()).to_bytes(4, "big") + _PROCESS_TAG + count.to_bytes(3, "big")
    return raw.hex()


def is_object_id(value: str) -> bool:
    return bool(_OBJECT_ID_RE.match(value or ""))


def parse_sort_by(sort_by: str) -> List[Tuple[str, bool]]:
    """Split ``"name:desc,createdAt"`` into ``[("name", True), ("createdAt", False)]``.

    The boolean marks descending order. A criterion without direction sorts ascending.
    """
    criteria = []
    for chunk in sort_by.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        key, _, order = chunk.partition(":")
        order = order.strip().lower() or "asc"
        if order not in ("asc", "desc"):
            raise ValueError(f"invalid sort order '{order}' for '{key}'")
        criteria.append((key.strip(), order == "desc"))
    return criteria
