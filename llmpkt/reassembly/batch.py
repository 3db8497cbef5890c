"""
Non-streaming reassembly helpers.

For callers that already hold every packet (or the complete model output)
and just want the ordered result.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from llmpkt.core.extractor import extract_packets
from llmpkt.core.packet import PacketRecord
from llmpkt.reassembly.engine import PacketReassembler


def _unique_sorted(packets: Iterable[PacketRecord | tuple | Mapping[str, Any]]) -> list[PacketRecord]:
    """Sort by sequence number, keeping the first record seen for each number."""
    seen: dict[int, PacketRecord] = {}
    for packet in packets:
        record = PacketRecord.from_value(packet)
        if record.sequence_number not in seen:
            seen[record.sequence_number] = record
    return [seen[seq] for seq in sorted(seen)]


def extract_ordered_payloads(packets: Iterable[PacketRecord | tuple | Mapping[str, Any]]) -> list[str]:
    """
    Return payloads sorted by sequence number.

    Gaps are ignored. The input is not modified.
    """
    return [record.payload for record in _unique_sorted(packets)]


def reassemble_packets(packets: Iterable[PacketRecord | tuple | Mapping[str, Any]]) -> str:
    """Return payloads sorted by sequence number, joined."""
    return ''.join(extract_ordered_payloads(packets))


def reassemble_text(text: str) -> str:
    """
    Reassemble the packets embedded in a complete model response.

    Runs a fresh PacketReassembler over the records in appearance order and
    finalizes it. Text without any packet record is returned unchanged.
    """
    records = extract_packets(text)
    if not records:
        return text

    engine = PacketReassembler()
    engine.process_all(records)
    return engine.finalize()
