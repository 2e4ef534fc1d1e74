import math
import re

from rest_framework.exceptions import Throttled
from rest_framework.throttling import AnonRateThrottle

_PERIODS = {"s": 1, "m": 60, "h": 3600, "d": 86400}
_PERIOD_RE = re.compile(r"(\d*)([smhd])")


class LoginRateThrottle(AnonRateThrottle):
    """Per-client throttle for login attempts.

    Accepts multiplied periods such as ``15/15m`` (15 requests per 15 minutes)
    on top of DRF's plain ``15/m`` and ``15/minute`` forms.
    """

    scope = "login"

    def get_cache_key(self, request, view):
        # Count every attempt from the client, authenticated or not.
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request),
        }

    def parse_rate(self, rate):
        if rate is None:
            return (None, None)
        num, period = rate.split("/")
        match = _PERIOD_RE.match(period)
        if match is None:
            msg = f"Invalid throttle rate period: {period!r}"
            raise ValueError(msg)
        multiplier = int(match.group(1) or 1)
        return (int(num), multiplier * _PERIODS[match.group(2)])


class LoginThrottled(Throttled):
    default_detail = "Too many login attempts. Please try again later."

    def __init__(self, wait=None):
        # Fixed message; the wait still goes out in the Retry-After header.
        super().__init__(detail=self.default_detail)
        self.wait = math.ceil(wait) if wait is not None else None
