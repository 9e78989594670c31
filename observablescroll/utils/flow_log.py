"""Timestamped trace output for scroll tracking diagnostics."""

import time

from observablescroll.utils.settings import get_trace_enabled

_flow_log_last: dict[str, float] = {}


def log_flow(component: str, message: str, *, level: str = "DEBUG",
             throttle_key: str | None = None, every_s: float | None = None):
    """Timestamped, optionally throttled flow logging for scroll diagnostics."""
    # WARNING lines always go out; everything else needs `scroll_trace_logs`.
    if level != "WARNING" and not get_trace_enabled():
        return

    now = time.time()
    if throttle_key and every_s is not None:
        last = _flow_log_last.get(throttle_key, 0.0)
        if (now - last) < every_s:
            return
        _flow_log_last[throttle_key] = now
    ts = time.strftime("%H:%M:%S", time.localtime(now)) + f".{int((now % 1) * 1000):03d}"
    print(f"[{ts}][TRACE][{component}][{level}] {message}")
