"""
In-process request/error counters and health information.

One SystemMonitor per process (``monitor`` below). Counters reset on restart
and are not shared between worker processes.
"""
import logging
import resource
import sys
import threading
import time

from django.db import connection, DatabaseError
from django.utils import timezone

logger = logging.getLogger(__name__)


def format_uptime(seconds):
    seconds = int(seconds)
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")
    return " ".join(parts)


def _peak_rss_mb():
    rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # bytes on macOS, kilobytes on linux
    if sys.platform == "darwin":
        rss = rss / 1024
    return round(rss / 1024)


class SystemMonitor:
    def __init__(self):
        self.start_time = time.monotonic()
        self.request_count = 0
        self.error_count = 0
        self.last_health_check = None
        self._lock = threading.Lock()

    def track_request(self):
        with self._lock:
            self.request_count += 1

    def track_error(self):
        with self._lock:
            self.error_count += 1

    def uptime(self):
        return time.monotonic() - self.start_time

    def metrics(self):
        uptime = self.uptime()
        total, errors = self.request_count, self.error_count
        return {
            "uptime": {"seconds": int(uptime), "formatted": format_uptime(uptime)},
            "memory": {"rss": f"{_peak_rss_mb()}MB"},
            "requests": {
                "total": total,
                "errors": errors,
                "errorRate": f"{errors / total * 100:.2f}%" if total else "0%",
            },
            "timestamp": timezone.now().isoformat(),
        }

    def health_check(self):
        health = {"status": "healthy", "timestamp": timezone.now().isoformat(), "checks": {}}
        try:
            connection.ensure_connection()
            health["checks"]["database"] = {"status": "connected", "vendor": connection.vendor}
        except DatabaseError as e:
            logger.error("Health check failed: %s", e)
            health["checks"]["database"] = {"status": "disconnected", "error": str(e)}
            health["status"] = "unhealthy"

        self.last_health_check = health
        return health


class MetricsLogger(threading.Thread):
    """Logs ``monitor.metrics()`` every ``interval_minutes`` until stopped."""

    def __init__(self, system_monitor, interval_minutes):
        super().__init__(name="metrics-logger", daemon=True)
        self.monitor = system_monitor
        self.interval = interval_minutes * 60
        self._stopped = threading.Event()

    def run(self):
        while not self._stopped.wait(self.interval):
            logger.info("System metrics: %s", self.monitor.metrics())

    def stop(self):
        self._stopped.set()


monitor = SystemMonitor()
