"""Reassembly modules."""

from llmpkt.reassembly.engine import (
    PacketReassembler,
    ReassemblerConfig,
    ReassemblyState,
    ReassemblySnapshot
)
from llmpkt.reassembly.stream import (
    StreamReassembler,
    StreamProgress,
    StreamState
)
from llmpkt.reassembly.batch import (
    extract_ordered_payloads,
    reassemble_packets,
    reassemble_text
)
from llmpkt.reassembly.live import (
    LiveReassemblyProcessor,
    StreamUpdate
)

__all__ = [
    'PacketReassembler',
    'ReassemblerConfig',
    'ReassemblyState',
    'ReassemblySnapshot',
    'StreamReassembler',
    'StreamProgress',
    'StreamState',
    'extract_ordered_payloads',
    'reassemble_packets',
    'reassemble_text',
    'LiveReassemblyProcessor',
    'StreamUpdate',
]
