"""Per-run execution state: variable bag, node outputs, and the execution log."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python

SYSTEM_NODE_ID = "system"


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


class LogEvent(StrEnum):
    """What happened to a node."""

    START = "start"
    SUCCESS = "success"
    ERROR = "error"
    SKIP = "skip"


class LogEntry(BaseModel):
    """One line of the execution log. Serialized with camelCase keys (``nodeId``)."""

    node_id: str
    event: LogEvent
    message: str = ""
    timestamp: str = Field(default_factory=utc_now_iso)
    data: Any = None

    model_config = {"populate_by_name": True, "alias_generator": to_camel, "extra": "allow"}

    @field_validator("timestamp", mode="before")
    @classmethod
    def _datetime_to_iso(cls, value: Any) -> Any:
        return value.isoformat() if isinstance(value, datetime) else value

    def to_dict(self) -> dict[str, Any]:
        """Wire form. ``data`` is omitted when the entry carries none."""
        payload: dict[str, Any] = {
            "nodeId": self.node_id,
            "event": self.event.value,
            "message": self.message,
            "timestamp": self.timestamp,
        }
        if self.data is not None:
            payload["data"] = to_jsonable_python(self.data, fallback=str)
        return payload


@dataclass
class ExecutionContext:
    """
    Mutable state owned by exactly one run.

    ``outputs`` and ``log`` are append-only while the run is in progress.
    ``variables`` is reserved for node kinds that need scratch space; the
    current executors leave it empty.
    """

    variables: dict[str, Any] = field(default_factory=dict)
    outputs: dict[str, Any] = field(default_factory=dict)
    log: list[LogEntry] = field(default_factory=list)

    def log_event(
        self,
        node_id: str,
        event: LogEvent,
        message: str,
        data: Any = None,
    ) -> LogEntry:
        """Append a timestamped entry to the execution log and return it."""
        entry = LogEntry(
            node_id=node_id,
            event=event,
            message=message,
            timestamp=utc_now_iso(),
            data=data,
        )
        self.log.append(entry)
        return entry

    def record_output(self, node_id: str, value: Any) -> None:
        self.outputs[node_id] = value
