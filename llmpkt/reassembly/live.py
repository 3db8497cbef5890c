"""
Live update feed for streamed model output.

Wraps a StreamReassembler and reports everything it does as typed,
timestamped updates through a single callback, for UI consumers that render
progress while a response is still being generated.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from llmpkt.reassembly.engine import ReassemblerConfig
from llmpkt.reassembly.stream import StreamProgress, StreamReassembler

UPDATE_CHUNK = 'chunk'
UPDATE_PROGRESS = 'progress'
UPDATE_COMPLETE = 'complete'


@dataclass(frozen=True)
class StreamUpdate:
    """One live update."""
    type: str
    data: Any
    timestamp: str

    def to_dict(self) -> dict[str, Any]:
        data = self.data.to_dict() if isinstance(self.data, StreamProgress) else self.data
        return {'type': self.type, 'data': data, 'timestamp': self.timestamp}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class LiveReassemblyProcessor:
    """
    Turns stream reassembly callbacks into StreamUpdate events.

    ``chunk`` updates carry each payload as it is emitted, ``progress``
    updates carry a StreamProgress after each text chunk, and a single
    ``complete`` update carries the final message.

    Args:
        on_update: Receives every update, in order
        config: Engine configuration
    """

    def __init__(
        self,
        on_update: Callable[[StreamUpdate], None] | None = None,
        config: ReassemblerConfig | None = None,
    ):
        self.on_update = on_update
        self.updates: list[StreamUpdate] = []
        self._stream = StreamReassembler(
            on_payload_ready=lambda payload: self._publish(UPDATE_CHUNK, payload),
            on_complete=lambda message: self._publish(UPDATE_COMPLETE, message),
            on_progress=lambda progress: self._publish(UPDATE_PROGRESS, progress),
            config=config,
        )

    def _publish(self, update_type: str, data: Any) -> None:
        update = StreamUpdate(type=update_type, data=data, timestamp=_now())
        self.updates.append(update)
        if self.on_update:
            self.on_update(update)

    @property
    def stream(self) -> StreamReassembler:
        return self._stream

    def process_chunk(self, text: str) -> StreamProgress:
        return self._stream.handle_chunk(text)

    def complete(self) -> str:
        return self._stream.complete()
