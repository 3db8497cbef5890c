"""
Packet record definitions.

A packet is one fragment of a larger message: a position (sequence number)
and a piece of content (payload). Records are produced by the extractor or
supplied directly by callers, and consumed by the reassembly engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass
class PacketRecord:
    """
    One fragment of a reassembled message.

    Attributes:
        sequence_number: Position of the fragment in the final message
        payload: Fragment text
        timestamp: Capture time, informational only (never used for ordering)
        id: Optional caller-supplied identifier

    Examples:
        >>> from llmpkt import PacketRecord
        >>> pkt = PacketRecord(sequence_number=2, payload="world!")
        >>> pkt.to_dict()
        {'sequence_number': 2, 'payload': 'world!', 'timestamp': None, 'id': None}
    """
    sequence_number: int
    payload: str
    timestamp: float | None = None
    id: str | None = None

    @property
    def seq(self) -> int:
        """Short alias for sequence_number."""
        return self.sequence_number

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            'sequence_number': self.sequence_number,
            'payload': self.payload,
            'timestamp': self.timestamp,
            'id': self.id,
        }

    @classmethod
    def from_value(cls, value: PacketRecord | tuple | Mapping[str, Any]) -> PacketRecord:
        """
        Coerce a caller-supplied value into a PacketRecord.

        Accepts an existing record, a ``(sequence_number, payload)`` tuple, or
        a mapping with ``sequence_number`` (or ``seq``) and ``payload`` keys.

        Raises:
            TypeError: If the value has none of the supported shapes
            KeyError: If a mapping lacks the sequence or payload key
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, tuple):
            seq, payload = value[0], value[1]
            return cls(sequence_number=int(seq), payload=payload)

        if isinstance(value, Mapping):
            if 'sequence_number' in value:
                seq = value['sequence_number']
            elif 'seq' in value:
                seq = value['seq']
            else:
                raise KeyError("packet mapping needs a 'sequence_number' or 'seq' key")
            return cls(
                sequence_number=int(seq),
                payload=value['payload'],
                timestamp=value.get('timestamp'),
                id=value.get('id'),
            )

        raise TypeError(f"Cannot build a PacketRecord from {type(value).__name__}")

    def __repr__(self) -> str:
        return f'Packet(sequence_number={self.sequence_number}, payload="{self.payload}")'
