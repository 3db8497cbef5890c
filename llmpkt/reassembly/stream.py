"""
Streaming reassembly over growing text.

Model output arrives in chunks that can split a packet record anywhere.
The stream reassembler accumulates text, extracts every complete record,
feeds it to a PacketReassembler and cuts the consumed text out so it is
never scanned twice. An incomplete trailing record stays pending until a
later chunk completes it.

Not thread-safe: deliver chunks one at a time, each processed to completion
before the next.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable
import logging

from llmpkt.core.extractor import PacketExtractor, PacketMatch, get_default_extractor
from llmpkt.reassembly.engine import PacketReassembler, ReassemblerConfig, ReassemblySnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StreamProgress:
    """Progress reported after each chunk."""
    emitted_count: int
    current_message: str
    buffered_count: int = 0
    next_expected_sequence: int = 0
    chunks_received: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            'emitted_count': self.emitted_count,
            'current_message': self.current_message,
            'buffered_count': self.buffered_count,
            'next_expected_sequence': self.next_expected_sequence,
            'chunks_received': self.chunks_received,
        }


@dataclass
class StreamState:
    """Text accumulated but not yet consumed into packets."""
    pending_text: str = ''
    chunks_received: int = 0
    packets_extracted: int = 0


class StreamReassembler:
    """
    Reassembles packets embedded in a text stream.

    Args:
        on_payload_ready: Called once per payload emitted by the engine
        on_complete: Called with the final message on completion
        on_progress: Called with a StreamProgress after every chunk
        extractor: Record extractor (default: shared default extractor)
        config: Engine configuration

    Examples:
        >>> from llmpkt import StreamReassembler
        >>> stream = StreamReassembler()
        >>> _ = stream.handle_chunk('noise Packet(sequence_number=1, pay')
        >>> _ = stream.handle_chunk('load="world") Packet(sequence_number=0, payload="Hello ")')
        >>> stream.complete()
        'Hello world'
    """

    def __init__(
        self,
        on_payload_ready: Callable[[str], None] | None = None,
        on_complete: Callable[[str], None] | None = None,
        on_progress: Callable[[StreamProgress], None] | None = None,
        extractor: PacketExtractor | None = None,
        config: ReassemblerConfig | None = None,
    ):
        self.on_progress = on_progress
        self.extractor = extractor or get_default_extractor()
        self._engine = PacketReassembler(
            on_payload_ready=on_payload_ready,
            on_complete=on_complete,
            config=config,
        )
        self._state = StreamState()

    @property
    def engine(self) -> PacketReassembler:
        return self._engine

    @property
    def pending_text(self) -> str:
        return self._state.pending_text

    @property
    def packets_extracted(self) -> int:
        return self._state.packets_extracted

    def handle_chunk(self, text: str) -> StreamProgress:
        """
        Consume one chunk of text.

        Returns:
            Progress after the chunk has been processed
        """
        state = self._state
        state.chunks_received += 1
        state.pending_text += text

        matches = self.extractor.find_packets(state.pending_text)
        for match in matches:
            self._engine.process_packet(match.record)

        if matches:
            state.packets_extracted += len(matches)
            state.pending_text = self._remove_matches(state.pending_text, matches)
            logger.debug("chunk %d: consumed %d packets, %d chars pending",
                         state.chunks_received, len(matches), len(state.pending_text))

        progress = self._progress()
        if self.on_progress:
            self.on_progress(progress)
        return progress

    @staticmethod
    def _remove_matches(text: str, matches: list[PacketMatch]) -> str:
        """Cut matched spans out of text (matches are ordered and disjoint)."""
        parts = []
        pos = 0
        for match in matches:
            parts.append(text[pos:match.start])
            pos = match.end
        parts.append(text[pos:])
        return ''.join(parts)

    def _progress(self) -> StreamProgress:
        return StreamProgress(
            emitted_count=self._engine.emitted_count,
            current_message=self._engine.message,
            buffered_count=self._engine.buffered_count,
            next_expected_sequence=self._engine.next_expected_sequence,
            chunks_received=self._state.chunks_received,
        )

    def complete(self) -> str:
        """Finalize the engine and return the full message."""
        return self._engine.finalize()

    def feed(self, chunks: Iterable[str]) -> str:
        """Handle every chunk in order, then complete."""
        for chunk in chunks:
            self.handle_chunk(chunk)
        return self.complete()

    def get_snapshot(self) -> ReassemblySnapshot:
        return self._engine.get_snapshot()

    def reset(self) -> None:
        """Drop pending text and engine state."""
        self._state = StreamState()
        self._engine.reset()
