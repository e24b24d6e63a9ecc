from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    QUERY_COMPLETION = "query_completion"
    URL_COMPLETION = "url_completion"


class QueryStatus(str, Enum):
    STARTED = "started"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class SSEEvent:
    event: EventType
    data: dict[str, Any] = field(default_factory=dict)

    def format(self) -> str:
        return f"event: {self.event.value}\ndata: {json.dumps(self.data)}\n\n"
