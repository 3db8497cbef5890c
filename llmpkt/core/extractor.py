"""
Packet record extraction from free text.

Finds records of the form ``Packet(sequence_number=2, payload="world!")``
embedded in model output. Fields may appear in either order, with arbitrary
text between them, as long as both sit inside one ``Packet( ... )`` span.

Anything that does not match the full record shape (unterminated quotes,
non-numeric sequence fields, records cut off mid-way) is not a record and is
skipped without error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator

from llmpkt.core.packet import PacketRecord


# Text allowed between fields: anything but parentheses, with double-quoted
# values consumed as a unit so that a quoted ')' does not close the marker.
_FILLER = r'(?:[^()"]|"[^"]*")*?'
_TAIL = r'(?:[^()"]|"[^"]*")*\)'


@dataclass
class PacketPattern:
    """
    Shape of a textual packet record.

    Attributes:
        markers: Record marker names, e.g. ``Packet``
        sequence_fields: Accepted names for the sequence number field
        payload_fields: Accepted names for the payload field
        ignore_case: Match markers and field names case-insensitively
    """
    markers: tuple[str, ...] = ('Packet',)
    sequence_fields: tuple[str, ...] = ('sequence_number', 'seq')
    payload_fields: tuple[str, ...] = ('payload',)
    ignore_case: bool = True

    def __post_init__(self):
        for name in ('markers', 'sequence_fields', 'payload_fields'):
            values = tuple(getattr(self, name))
            if not values or any(not v for v in values):
                raise ValueError(f"PacketPattern.{name} must be a non-empty list of names")
            setattr(self, name, values)

    @staticmethod
    def _alternation(names: tuple[str, ...]) -> str:
        # Longest first so 'sequence_number' wins over 'seq'
        ordered = sorted(names, key=len, reverse=True)
        return '|'.join(re.escape(n) for n in ordered)

    def compile(self) -> re.Pattern:
        """Build the record regex."""
        marker = self._alternation(self.markers)
        seq_names = self._alternation(self.sequence_fields)
        payload_names = self._alternation(self.payload_fields)

        seq_a = rf'\b(?:{seq_names})\s*=\s*(?P<seq_a>[0-9]+)\b'
        payload_a = rf'\b(?:{payload_names})\s*=\s*"(?P<payload_a>[^"]*)"'
        seq_b = rf'\b(?:{seq_names})\s*=\s*(?P<seq_b>[0-9]+)\b'
        payload_b = rf'\b(?:{payload_names})\s*=\s*"(?P<payload_b>[^"]*)"'

        regex = (
            rf'(?:{marker})\s*\('
            rf'(?:{_FILLER}{seq_a}{_FILLER}{payload_a}'
            rf'|{_FILLER}{payload_b}{_FILLER}{seq_b})'
            rf'{_TAIL}'
        )
        flags = re.IGNORECASE if self.ignore_case else 0
        return re.compile(regex, flags)


@dataclass
class PacketMatch:
    """A record found in text, with the span it occupied."""
    record: PacketRecord
    start: int
    end: int

    @property
    def span(self) -> tuple[int, int]:
        return self.start, self.end


class PacketExtractor:
    """
    Extracts packet records from text.

    Records are returned in the order they appear in the text, not in
    sequence order. Matches are leftmost and non-overlapping.

    Examples:
        >>> from llmpkt import PacketExtractor
        >>> extractor = PacketExtractor()
        >>> text = 'Packet(sequence_number=1, payload="b") Packet(payload="a", seq=0)'
        >>> [(p.sequence_number, p.payload) for p in extractor.extract(text)]
        [(1, 'b'), (0, 'a')]
    """

    def __init__(self, pattern: PacketPattern | None = None):
        self.pattern = pattern or PacketPattern()
        self._regex = self.pattern.compile()

    def iter_matches(self, text: str, timestamp: float | None = None) -> Iterator[PacketMatch]:
        """Yield matches left to right."""
        if not text:
            return

        for m in self._regex.finditer(text):
            if m.group('seq_a') is not None:
                seq, payload = m.group('seq_a'), m.group('payload_a')
            else:
                seq, payload = m.group('seq_b'), m.group('payload_b')

            record = PacketRecord(
                sequence_number=int(seq),
                payload=payload,
                timestamp=timestamp,
            )
            yield PacketMatch(record=record, start=m.start(), end=m.end())

    def find_packets(self, text: str, timestamp: float | None = None) -> list[PacketMatch]:
        """Return all matches with their spans."""
        return list(self.iter_matches(text, timestamp))

    def extract(self, text: str, timestamp: float | None = None) -> list[PacketRecord]:
        """Return all records in textual appearance order."""
        return [m.record for m in self.iter_matches(text, timestamp)]

    def parse_one(self, text: str, timestamp: float | None = None) -> PacketRecord | None:
        """Return the first record in text, or None."""
        for m in self.iter_matches(text, timestamp):
            return m.record
        return None


_default_extractor: PacketExtractor | None = None


def get_default_extractor() -> PacketExtractor:
    """Get the shared extractor for the default record shape."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = PacketExtractor()
    return _default_extractor


def extract_packets(text: str, timestamp: float | None = None) -> list[PacketRecord]:
    """
    Find all well-formed packet records in text.

    Args:
        text: Arbitrary text, possibly containing partial or malformed records
        timestamp: Optional capture time stamped onto every record

    Returns:
        Records in textual appearance order; empty list if none found
    """
    return get_default_extractor().extract(text, timestamp)


def find_packets(text: str, timestamp: float | None = None) -> list[PacketMatch]:
    """Find all well-formed packet records in text, with their spans."""
    return get_default_extractor().find_packets(text, timestamp)


def parse_packet_string(text: str, timestamp: float | None = None) -> PacketRecord | None:
    """Parse a single record such as ``Packet(sequence_number=2, payload="world!")``."""
    return get_default_extractor().parse_one(text, timestamp)
