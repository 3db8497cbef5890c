"""
Export and feature example.

Demonstrates exporting extracted packets to different formats and computing
reorder features for a session:
- DataFrame (pandas)
- CSV
- JSON
"""

from pathlib import Path

from llmpkt import FeatureExtractor, extract_packets, to_csv, to_dataframe, to_json

response = '''
Packet(sequence_number=2, payload="world!")
Packet(sequence_number=0, payload="Hello,")
Packet(sequence_number=4, payload="How")
Packet(sequence_number=1, payload=" beautiful")
Packet(sequence_number=3, payload=" are you?")
'''

packets = extract_packets(response)

# === Export to DataFrame ===
df = to_dataframe(packets)
print("DataFrame export:")
print(df)
print()

print("Sorted by sequence number:")
print(df.sort_values('sequence_number')[['sequence_number', 'payload', 'arrival_index']])
print()

# === Export to CSV / JSON ===
Path('output').mkdir(exist_ok=True)
to_csv(packets, 'output/packets.csv')
print("Exported to CSV: output/packets.csv")
to_json(packets, 'output/packets.json')
print("Exported to JSON: output/packets.json")
print()

# === Reorder features ===
features = FeatureExtractor(compute_statistics=True).extract(packets)
stats = features.compute_statistics()
print("Reorder features:")
print(f"  Displacements: {features.displacements.tolist()}")
print(f"  Buffer depths: {features.buffer_depths.tolist()}")
print(f"  Max buffer depth: {stats['max_buffer_depth']}")
print(f"  In-order ratio: {stats['in_order_ratio']:.2f}")
print(f"  Gaps: {stats['gap_count']}")
