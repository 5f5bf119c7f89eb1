from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Trace:
    prompt: str
    request_id: str | None = None
    states: list[str] = field(default_factory=list)
    events: list[dict[str, Any]] = field(default_factory=list)

    def enter(self, state: str, **payload: Any) -> None:
        self.states.append(state)
        self.emit(state, payload)

    def emit(self, name: str, payload: dict[str, Any]) -> None:
        enriched_payload = dict(payload)
        if self.request_id:
            enriched_payload.setdefault("request_id", self.request_id)
        self.events.append({"event": name, "payload": enriched_payload})
