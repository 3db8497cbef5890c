"""
Streaming reassembly example.

Demonstrates feeding model output to a StreamReassembler in small chunks,
with records split across chunk boundaries, and the LiveReassemblyProcessor
update feed.
"""

from llmpkt import LiveReassemblyProcessor, StreamReassembler
from llmpkt.utils import configure_logging

configure_logging()

response = (
    'Some random text... Packet(sequence_number=2, payload="world!")'
    'More text... Packet(sequence_number=0, payload="Hello,")'
    'Even more... Packet(sequence_number=1, payload=" beautiful")'
    'Almost done... Packet(sequence_number=3, payload=" are you?")'
    'Final chunk... Packet(sequence_number=4, payload="How")'
)

# Split into fixed-size chunks, cutting records anywhere
chunks = [response[i:i + 17] for i in range(0, len(response), 17)]

stream = StreamReassembler(
    on_payload_ready=lambda payload: print(f"  chunk ready: {payload!r}"),
    on_progress=lambda p: print(f"  progress: {p.emitted_count} emitted, {p.buffered_count} buffered"),
)

for chunk in chunks:
    stream.handle_chunk(chunk)

print(f"Complete message: {stream.complete()!r}")
print(f"Unconsumed text: {stream.pending_text!r}")
print()

# Typed updates for a UI
processor = LiveReassemblyProcessor(on_update=lambda u: print(f"  [{u.type}] {u.data}"))
for chunk in chunks:
    processor.process_chunk(chunk)
processor.complete()
print(f"Updates published: {len(processor.updates)}")
