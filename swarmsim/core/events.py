import logging
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)

INFO = "info"
WARNING = "warning"
ERROR = "error"

_LEVELS = {INFO: logging.INFO, WARNING: logging.WARNING, ERROR: logging.ERROR}


def format_time(seconds: float) -> str:
    seconds = max(0.0, seconds)
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


@dataclass(frozen=True)
class LogEvent:
    t: float          # simulated elapsed seconds at emission
    message: str
    level: str = INFO

    @property
    def time(self) -> str:
        return format_time(self.t)

    def to_record(self) -> dict:
        rec = asdict(self)
        rec["time"] = self.time
        return rec


class EventLog:
    """Emission-ordered list of mission events. Display is left to the caller."""

    def __init__(self):
        self.records: list[LogEvent] = []

    def emit(self, t: float, message: str, level: str = INFO) -> LogEvent:
        if level not in _LEVELS:
            raise ValueError(f"unknown event level: {level}")
        event = LogEvent(t, message, level)
        self.records.append(event)
        logger.log(_LEVELS[level], "[%s] %s", event.time, message)
        return event

    def clear(self):
        self.records.clear()

    def to_records(self) -> list[dict]:
        return [e.to_record() for e in self.records]

    def __iter__(self):
        return iter(self.records)

    def __len__(self):
        return len(self.records)
