"""
llmpkt - Packet stream reassembly for LLM output

Reassembles messages whose fragments ("packets" with a sequence number and a
payload) arrive out of order inside model output, either as a finished
response or as a stream of text chunks.

Example usage:
    from llmpkt import StreamReassembler

    stream = StreamReassembler(
        on_payload_ready=lambda payload: print(f"ready: {payload!r}"),
        on_progress=lambda p: print(f"  {p.emitted_count} emitted"),
    )

    for chunk in response_chunks:
        stream.handle_chunk(chunk)

    print(stream.complete())
"""

from llmpkt.core.packet import PacketRecord
from llmpkt.core.extractor import (
    PacketExtractor,
    PacketMatch,
    PacketPattern,
    extract_packets,
    find_packets,
    parse_packet_string
)
from llmpkt.reassembly.engine import (
    PacketReassembler,
    ReassemblerConfig,
    ReassemblyState,
    ReassemblySnapshot
)
from llmpkt.reassembly.stream import StreamReassembler, StreamProgress
from llmpkt.reassembly.batch import (
    extract_ordered_payloads,
    reassemble_packets,
    reassemble_text
)
from llmpkt.reassembly.live import LiveReassemblyProcessor, StreamUpdate
from llmpkt.features.extractor import FeatureExtractor, ReassemblyFeatures
from llmpkt.exporters import (
    to_dataframe,
    to_dict,
    to_json,
    to_csv,
    RecordExporter
)

__version__ = "0.1.0"

__all__ = [
    # Records
    'PacketRecord',

    # Extraction
    'PacketExtractor',
    'PacketMatch',
    'PacketPattern',
    'extract_packets',
    'find_packets',
    'parse_packet_string',

    # Reassembly
    'PacketReassembler',
    'ReassemblerConfig',
    'ReassemblyState',
    'ReassemblySnapshot',
    'StreamReassembler',
    'StreamProgress',
    'extract_ordered_payloads',
    'reassemble_packets',
    'reassemble_text',
    'LiveReassemblyProcessor',
    'StreamUpdate',

    # Features
    'FeatureExtractor',
    'ReassemblyFeatures',

    # Exporters
    'to_dataframe',
    'to_dict',
    'to_json',
    'to_csv',
    'RecordExporter',
]
