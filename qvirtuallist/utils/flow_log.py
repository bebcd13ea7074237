import time

from qvirtuallist.utils.settings import settings

_MINIMAL_LEVELS = {"INFO", "WARNING", "ERROR"}


class FlowLogMixin:
    def _log_flow(self, component: str, message: str, *, level: str = "DEBUG",
                  throttle_key: str | None = None, every_s: float | None = None):
        """Timestamped, optionally throttled flow logging for list diagnostics."""
        # Set `minimal_trace_logs` to False in settings to see DEBUG traces.
        try:
            minimal_trace = bool(settings.value("minimal_trace_logs", True, type=bool))
        except Exception:
            minimal_trace = True
        if minimal_trace and level not in _MINIMAL_LEVELS:
            return

        now = time.time()
        if throttle_key and every_s is not None:
            last_times = self.__dict__.setdefault("_flow_log_last", {})
            last = last_times.get(throttle_key, 0.0)
            if (now - last) < every_s:
                return
            last_times[throttle_key] = now
        ts = time.strftime("%H:%M:%S", time.localtime(now)) + f".{int((now % 1) * 1000):03d}"
        print(f"[{ts}][TRACE][{component}][{level}] {message}")
