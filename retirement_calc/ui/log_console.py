# retirement_calc/ui/log_console.py
"""
In-process log sink for the debug console.

A logging.Handler that keeps the most recent records and republishes each
one on the event bus. Subscribers connect to bus.logRecorded instead of
intercepting print/console output globally.
"""

from __future__ import annotations
import logging, datetime
from collections import deque
from dataclasses import dataclass
from typing import List, Optional

from .. import config
from .event_bus import EventBus, bus as default_bus

@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str       # debug | info | warn | error
    message: str

_LEVELS = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}

class LogConsole(logging.Handler):
    def __init__(self, maxlen: int = config.LOG_CACHE_SIZE, bus: Optional[EventBus] = None,
                 level: int = logging.INFO):
        super().__init__(level=level)
        self.bus = bus or default_bus
        self._entries: deque = deque(maxlen=maxlen)
        self._attached: List[logging.Logger] = []

    def emit(self, record: logging.LogRecord):
        try:
            entry = LogEntry(
                timestamp=datetime.datetime.fromtimestamp(record.created).strftime("%H:%M:%S"),
                level=_LEVELS.get(record.levelno, "info"),
                message=record.getMessage(),
            )
        except Exception:
            self.handleError(record)
            return
        self._entries.append(entry)
        self.bus.logRecorded.emit(entry)

    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def clear(self):
        self._entries.clear()

    def attach(self, logger_name: str = "retirement_calc") -> "LogConsole":
        lg = logging.getLogger(logger_name)
        lg.addHandler(self)
        if lg.level == logging.NOTSET or lg.level > self.level:
            lg.setLevel(self.level)
        self._attached.append(lg)
        return self

    def detach(self):
        for lg in self._attached:
            lg.removeHandler(self)
        self._attached.clear()
