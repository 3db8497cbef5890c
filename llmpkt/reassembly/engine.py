"""
Packet reassembly engine.

Handles sequence tracking and out-of-order buffering, emitting payloads in
sequence order as soon as they become contiguous.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping
import logging
import warnings

from llmpkt.core.packet import PacketRecord

logger = logging.getLogger(__name__)


@dataclass
class ReassemblerConfig:
    """Configuration for a reassembly engine."""
    # Warn once per session when this many packets are waiting for a gap.
    buffer_warning_threshold: int | None = None

    def __post_init__(self):
        if self.buffer_warning_threshold is not None and self.buffer_warning_threshold < 0:
            raise ValueError(
                f"buffer_warning_threshold must be >= 0, got {self.buffer_warning_threshold}"
            )


@dataclass
class ReassemblyState:
    """
    Mutable reassembly state owned by one engine.

    Every key in buffered_packets is greater than next_expected_sequence
    while the engine is at rest.
    """
    next_expected_sequence: int = 0
    buffered_packets: dict[int, str] = field(default_factory=dict)
    emitted_payloads: list[str] = field(default_factory=list)
    is_complete: bool = False


@dataclass(frozen=True)
class ReassemblySnapshot:
    """Read-only copy of a ReassemblyState."""
    next_expected_sequence: int
    buffered_packets: Mapping[int, str]
    emitted_payloads: tuple[str, ...]
    is_complete: bool

    @classmethod
    def from_state(cls, state: ReassemblyState) -> ReassemblySnapshot:
        return cls(
            next_expected_sequence=state.next_expected_sequence,
            buffered_packets=MappingProxyType(dict(state.buffered_packets)),
            emitted_payloads=tuple(state.emitted_payloads),
            is_complete=state.is_complete,
        )

    @property
    def message(self) -> str:
        return ''.join(self.emitted_payloads)

    @property
    def emitted_count(self) -> int:
        return len(self.emitted_payloads)

    @property
    def buffered_count(self) -> int:
        return len(self.buffered_packets)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            'next_expected_sequence': self.next_expected_sequence,
            'buffered_packets': dict(self.buffered_packets),
            'emitted_payloads': list(self.emitted_payloads),
            'is_complete': self.is_complete,
            'message': self.message,
        }


class PacketReassembler:
    """
    Reassembles an ordered message from packets arriving in any order.

    Packets whose sequence number equals the next expected one are emitted
    immediately, followed by any buffered packets that have become
    contiguous. Packets from the future are buffered; packets from the past
    are discarded. No input raises.

    Args:
        on_payload_ready: Called once per emitted payload, in emission order
        on_complete: Called with the joined message when finalized
        config: Engine configuration

    Examples:
        >>> from llmpkt import PacketReassembler, PacketRecord
        >>> engine = PacketReassembler()
        >>> engine.process_all([
        ...     PacketRecord(2, "world!"),
        ...     PacketRecord(0, "Hello,"),
        ...     PacketRecord(1, " beautiful "),
        ... ])
        ['Hello,', ' beautiful ', 'world!']
    """

    def __init__(
        self,
        on_payload_ready: Callable[[str], None] | None = None,
        on_complete: Callable[[str], None] | None = None,
        config: ReassemblerConfig | None = None,
    ):
        self.on_payload_ready = on_payload_ready
        self.on_complete = on_complete
        self.config = config or ReassemblerConfig()
        self._state = ReassemblyState()
        self._final_message: str | None = None
        self._buffer_warned = False
        self._stats = self._new_stats()

    @staticmethod
    def _new_stats() -> dict[str, int]:
        return {
            'processed': 0,
            'in_order': 0,
            'buffered': 0,
            'overwritten': 0,
            'discarded': 0,
            'drained': 0,
            'flushed': 0,
        }

    def process_packet(self, packet: PacketRecord | tuple | Mapping[str, Any]) -> list[str]:
        """
        Process a single packet.

        Returns:
            Payloads emitted by this call, in emission order (empty if the
            packet was buffered or discarded)
        """
        record = PacketRecord.from_value(packet)
        state = self._state

        if state.is_complete:
            warnings.warn(
                f"Reassembly already finalized; ignoring packet {record.sequence_number}",
                RuntimeWarning,
                stacklevel=2,
            )
            return []

        self._stats['processed'] += 1
        seq = record.sequence_number

        # Already emitted, or superseded
        if seq < state.next_expected_sequence:
            self._stats['discarded'] += 1
            return []

        # Out of order: wait for the gap to close
        if seq > state.next_expected_sequence:
            if seq in state.buffered_packets:
                self._stats['overwritten'] += 1
            else:
                self._stats['buffered'] += 1
            state.buffered_packets[seq] = record.payload
            logger.debug("buffered packet %d (expecting %d)", seq, state.next_expected_sequence)
            self._check_buffer_depth()
            return []

        # In order
        self._stats['in_order'] += 1
        ready = [record.payload]
        self._emit(record.payload)

        # Drain contiguous buffered packets
        while state.next_expected_sequence in state.buffered_packets:
            payload = state.buffered_packets.pop(state.next_expected_sequence)
            self._stats['drained'] += 1
            ready.append(payload)
            self._emit(payload)

        if len(ready) > 1:
            logger.debug("drained %d buffered packets up to %d",
                         len(ready) - 1, state.next_expected_sequence - 1)

        return ready

    def _emit(self, payload: str) -> None:
        state = self._state
        state.emitted_payloads.append(payload)
        state.next_expected_sequence += 1
        if self.on_payload_ready:
            self.on_payload_ready(payload)

    def _check_buffer_depth(self) -> None:
        threshold = self.config.buffer_warning_threshold
        if threshold is None or self._buffer_warned:
            return
        if len(self._state.buffered_packets) > threshold:
            self._buffer_warned = True
            warnings.warn(
                f"{len(self._state.buffered_packets)} packets buffered waiting for "
                f"sequence {self._state.next_expected_sequence}",
                ResourceWarning,
                stacklevel=3,
            )

    def process_all(self, packets: Iterable[PacketRecord | tuple | Mapping[str, Any]]) -> list[str]:
        """
        Process packets in the given arrival order.

        Returns:
            Copy of every payload emitted so far, in sequence order
        """
        for packet in packets:
            self.process_packet(packet)
        return list(self._state.emitted_payloads)

    def finalize(self) -> str:
        """
        Finish the session and return the full message.

        Packets still buffered behind an unfilled gap are flushed in ascending
        sequence order. This accepts a message with gaps; call it only when
        the stream is known to have ended. Calling again returns the same
        message without side effects.
        """
        if self._final_message is not None:
            return self._final_message

        state = self._state
        state.is_complete = True

        if state.buffered_packets:
            logger.debug("flushing %d packets past gap at %d",
                         len(state.buffered_packets), state.next_expected_sequence)

        for seq in sorted(state.buffered_packets):
            payload = state.buffered_packets.pop(seq)
            state.emitted_payloads.append(payload)
            state.next_expected_sequence = seq + 1
            self._stats['flushed'] += 1
            if self.on_payload_ready:
                self.on_payload_ready(payload)

        self._final_message = ''.join(state.emitted_payloads)

        if self.on_complete:
            self.on_complete(self._final_message)

        return self._final_message

    def get_snapshot(self) -> ReassemblySnapshot:
        """Get a read-only copy of the current state."""
        return ReassemblySnapshot.from_state(self._state)

    def reset(self) -> None:
        """Return to the initial state so the engine can serve a new session."""
        self._state = ReassemblyState()
        self._final_message = None
        self._buffer_warned = False
        self._stats = self._new_stats()

    @property
    def next_expected_sequence(self) -> int:
        return self._state.next_expected_sequence

    @property
    def is_complete(self) -> bool:
        return self._state.is_complete

    @property
    def emitted_count(self) -> int:
        return len(self._state.emitted_payloads)

    @property
    def buffered_count(self) -> int:
        """Number of packets waiting for a gap to close."""
        return len(self._state.buffered_packets)

    @property
    def message(self) -> str:
        """Payloads emitted so far, joined."""
        return ''.join(self._state.emitted_payloads)

    @property
    def stats(self) -> dict:
        """Get reassembly statistics."""
        return {**self._stats, 'pending': self.buffered_count}
