"""
Purpose: Keep only the newest lookup result per input field.
What it does:
Each outgoing lookup is tagged with a monotonically increasing token for its
field (e.g. "pickup", "dropoff"). A response is applied only if its token is
still the latest one issued for that field; slower, older responses are dropped.
"""

from __future__ import annotations

import threading
from typing import Dict


class RequestTokens:
    def __init__(self):
        self._latest: Dict[str, int] = {}
        self._lock = threading.Lock()

    def issue(self, field: str) -> int:
        with self._lock:
            token = self._latest.get(field, 0) + 1
            self._latest[field] = token
            return token

    def is_current(self, field: str, token: int) -> bool:
        with self._lock:
            return self._latest.get(field) == token

    def invalidate(self, field: str) -> None:
        """Drop whatever is in flight for a field without issuing a new lookup."""
        self.issue(field)
