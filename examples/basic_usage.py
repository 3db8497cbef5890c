"""
Basic llmpkt usage example.

Demonstrates:
- Extracting packet records from a model response
- Reassembling them in sequence order with PacketReassembler
- Inspecting engine state and statistics
"""

from llmpkt import PacketReassembler, extract_packets, reassemble_text
from llmpkt.utils import configure_logging

configure_logging()

response = '''
**Example Input:**
Packet(sequence_number=2, payload="world!")
Packet(sequence_number=0, payload="Hello,")
Packet(sequence_number=4, payload="How")
Packet(sequence_number=1, payload=" beautiful")
Packet(sequence_number=3, payload=" are you?")
'''

# Records come back in the order they appear in the text
packets = extract_packets(response)
print(f"Packets found: {len(packets)}")
for pkt in packets:
    print(f"  {pkt}")
print()

# Reassemble, printing each payload as soon as it becomes ready
engine = PacketReassembler(on_payload_ready=lambda payload: print(f"  ready: {payload!r}"))
ordered = engine.process_all(packets)
print(f"Ordered payloads: {ordered}")
print()

snapshot = engine.get_snapshot()
print(f"Next expected: {snapshot.next_expected_sequence}")
print(f"Still buffered: {snapshot.buffered_count}")
print(f"Stats: {engine.stats}")
print()

# A missing packet: finalize flushes what is left
engine.reset()
engine.process_all(p for p in packets if p.sequence_number != 1)
print(f"Before finalize: {engine.message!r} (buffered: {engine.buffered_count})")
print(f"After finalize:  {engine.finalize()!r}")
print()

# One-shot helper
print(f"reassemble_text: {reassemble_text(response)!r}")
