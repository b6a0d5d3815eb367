from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from threading import Lock


@dataclass(slots=True)
class UsedCodeCache:
    """In-memory record of TOTP codes already accepted, keyed by time step.

    A code can be claimed once per step. Steps older than `keep_steps` behind
    the newest claimed step are pruned, so memory stays bounded by the
    verification window.
    """

    keep_steps: int = 3
    max_entries: int = 10_000
    _used: "OrderedDict[tuple[int, str], None]" = field(default_factory=OrderedDict)
    _lock: Lock = field(default_factory=Lock)

    def claim(self, step: int, code: str) -> bool:
        key = (step, code)
        with self._lock:
            self._prune(step - self.keep_steps)
            if key in self._used:
                return False
            while self.max_entries > 0 and len(self._used) >= self.max_entries:
                self._used.popitem(last=False)
            self._used[key] = None
            return True

    def _prune(self, cutoff: int) -> None:
        for k in list(self._used.keys()):
            if k[0] < cutoff:
                del self._used[k]

    def __len__(self) -> int:
        return len(self._used)
