"""Self checks for the clock, random source and codec."""

import asyncio
import time
from enum import Enum
from smalluid.uid import MAX_TIMESTAMP, SmallUid
from utils.entropy import next_u64
from utils.timestamp import format_timestamp, now_millis

# 2020-01-01T00:00:00Z
MIN_SANE_MILLIS = 1577836800000

class Status(Enum):
    OK = "healthy"
    DEGRADED = "degraded"
    FAIL = "unhealthy"

class CheckResult:
    __slots__ = ("name", "status", "msg", "latency_ms")

    def __init__(self, name, status, msg="", latency_ms=0.0):
        self.name = name
        self.status = status
        self.msg = msg
        self.latency_ms = latency_ms

    def to_dict(self):
        return {"name": self.name, "status": self.status.value,
                "msg": self.msg, "latency_ms": round(self.latency_ms, 3)}

class HealthReport:
    __slots__ = ("status", "checks", "uptime", "timestamp")

    def __init__(self, checks, critical, uptime=0):
        self.checks = checks
        self.uptime = uptime
        self.status = self._overall(checks, critical)
        self.timestamp = format_timestamp()

    @staticmethod
    def _overall(checks, critical):
        if any(c.status == Status.FAIL and c.name in critical for c in checks):
            return Status.FAIL
        if any(c.status != Status.OK for c in checks):
            return Status.DEGRADED
        return Status.OK

    def to_dict(self):
        return {"status": self.status.value,
                "timestamp": self.timestamp,
                "uptime": round(self.uptime, 1),
                "checks": [check.to_dict() for check in self.checks]}

class HealthChecker:
    """Runs registered checks concurrently; reports are cached for `ttl` seconds."""

    def __init__(self, ttl=1.0, timeout=5.0):
        self._checks = {}
        self._cache = None
        self._cache_time = 0
        self._ttl = ttl
        self._timeout = timeout
        self._start_time = time.time()

    @property
    def uptime(self):
        return time.time() - self._start_time

    def register(self, name, check_fn, critical=True):
        self._checks[name] = (check_fn, critical)

    async def _run(self, name, check_fn):
        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(check_fn(), timeout=self._timeout)
        except asyncio.TimeoutError:
            result = CheckResult(name, Status.FAIL, "timeout")
        except Exception as exc:
            result = CheckResult(name, Status.FAIL, str(exc))
        # Report under the registered name, whatever the check called itself.
        result.name = name
        result.latency_ms = (time.perf_counter() - started) * 1000
        return result

    async def check(self):
        now = time.time()
        if self._cache and now - self._cache_time < self._ttl:
            return self._cache

        results = await asyncio.gather(*(self._run(name, fn) for name, (fn, _) in self._checks.items()))
        critical = {name for name, (_, is_critical) in self._checks.items() if is_critical}
        self._cache = HealthReport(list(results), critical, now - self._start_time)
        self._cache_time = now
        return self._cache

# Checks
async def check_clock():
    millis = now_millis()
    if millis > MAX_TIMESTAMP:
        return CheckResult("clock", Status.FAIL, f"overflow@{millis}")
    if millis < MIN_SANE_MILLIS:
        return CheckResult("clock", Status.DEGRADED, f"behind@{millis}")
    return CheckResult("clock", Status.OK, format_timestamp(millis))

async def check_codec():
    uid = SmallUid.generate()
    if SmallUid.from_text(uid.text) != uid or SmallUid.from_text(uid.padded_text) != uid:
        return CheckResult("codec", Status.FAIL, f"roundtrip@{uid.value}")
    return CheckResult("codec", Status.OK, uid.text)

def create_entropy_check(samples=4):
    async def check():
        values = {next_u64() for _ in range(samples)}
        # Repeats across 64-bit draws mean the source is stuck.
        if len(values) < samples:
            return CheckResult("entropy", Status.FAIL, "repeat")
        return CheckResult("entropy", Status.OK, f"{samples}ok")
    return check
