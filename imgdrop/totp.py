"""TOTP verification (RFC 6238: SHA1, 6 digits, 30 second step)."""

from __future__ import annotations

import hmac
import re
import time

import pyotp

from imgdrop.security import UsedCodeCache

CODE_RE = re.compile(r"^[0-9]{6}$")
DIGITS = 6
INTERVAL = 30


class TotpVerifier:
    def __init__(
        self,
        secret: str,
        valid_window: int = 1,
        replay_guard: UsedCodeCache | None = None,
    ):
        self._totp = pyotp.TOTP(secret, digits=DIGITS, interval=INTERVAL)
        self.valid_window = valid_window
        self.replay_guard = replay_guard

    def validate(self, code: str | None, for_time: float | None = None) -> bool:
        """Check `code` against the current step and `valid_window` steps either side."""
        if not code or not CODE_RE.match(code):
            return False
        if for_time is None:
            for_time = time.time()
        step = int(for_time) // self._totp.interval
        for offset in range(-self.valid_window, self.valid_window + 1):
            if hmac.compare_digest(self._totp.at(for_time, offset), code):
                if self.replay_guard is None:
                    return True
                return self.replay_guard.claim(step + offset, code)
        return False
