"""
Feature extraction for reassembly sessions.

Provides ReassemblyFeatures for storing per-arrival sequences describing how
out of order a session was, and FeatureExtractor for computing them from a
list of packets in arrival order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping
import numpy as np

from llmpkt.core.packet import PacketRecord
from llmpkt.reassembly.engine import PacketReassembler


@dataclass
class ReassemblyFeatures:
    """
    Container for reassembly session features.

    All sequences are indexed by arrival position.

    Attributes:
        sequence_numbers: Sequence number of each arrival
        payload_lengths: Payload length of each arrival
        displacements: Arrival index minus the packet's rank in sequence
            order (0 for a perfectly ordered stream)
        buffer_depths: Engine buffer size right after each arrival
        emitted_per_arrival: Payloads released by each arrival
        _statistics: Computed statistical features (lazy evaluation)

    Examples:
        >>> from llmpkt import FeatureExtractor, extract_packets
        >>> features = FeatureExtractor().extract(extract_packets(text))
        >>> stats = features.compute_statistics()
        >>> print(f"Max buffer depth: {stats['max_buffer_depth']}")
        >>> print(f"Mean displacement: {stats['displacements']['mean']:.2f}")
    """

    sequence_numbers: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64))
    payload_lengths: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64))
    displacements: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64))
    buffer_depths: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64))
    emitted_per_arrival: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64))

    # Statistical features (computed lazily)
    _statistics: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_packets(cls, packets: Iterable[PacketRecord | tuple | Mapping[str, Any]]) -> ReassemblyFeatures:
        """
        Build features by replaying packets through a fresh engine.

        Args:
            packets: Packets in arrival order
        """
        records = [PacketRecord.from_value(p) for p in packets]
        features = cls()
        if not records:
            return features

        engine = PacketReassembler()
        depths = []
        released = []
        for record in records:
            released.append(len(engine.process_packet(record)))
            depths.append(engine.buffered_count)

        seqs = np.array([r.sequence_number for r in records], dtype=np.int64)
        ranks = np.searchsorted(np.unique(seqs), seqs)

        features.sequence_numbers = seqs
        features.payload_lengths = np.array([len(r.payload) for r in records], dtype=np.int64)
        features.displacements = np.arange(len(records), dtype=np.int64) - ranks
        features.buffer_depths = np.array(depths, dtype=np.int64)
        features.emitted_per_arrival = np.array(released, dtype=np.int64)
        return features

    @property
    def packet_count(self) -> int:
        return len(self.sequence_numbers)

    def compute_statistics(self) -> dict[str, Any]:
        """
        Compute statistical features from sequences.

        Returns:
            Per-sequence stats (mean, std, min, max, median, sum, count) plus
            'packet_count', 'duplicate_count', 'gap_count',
            'max_buffer_depth' and 'in_order_ratio' at top level.
        """
        stats: dict[str, Any] = {}

        for name in ('payload_lengths', 'displacements', 'buffer_depths', 'emitted_per_arrival'):
            arr = getattr(self, name)
            if len(arr) > 0:
                stats[name] = self._compute_array_stats(arr)

        n = self.packet_count
        stats['packet_count'] = n

        if n == 0:
            stats['duplicate_count'] = 0
            stats['gap_count'] = 0
            stats['max_buffer_depth'] = 0
            stats['in_order_ratio'] = 0.0
            self._statistics = stats
            return stats

        unique = np.unique(self.sequence_numbers)
        stats['duplicate_count'] = int(n - len(unique))

        # Missing numbers between 0 and the highest one seen
        in_range = unique[unique >= 0]
        if len(in_range) > 0:
            stats['gap_count'] = int(in_range[-1] + 1 - len(in_range))
        else:
            stats['gap_count'] = 0

        stats['max_buffer_depth'] = int(np.max(self.buffer_depths))
        stats['in_order_ratio'] = float(np.count_nonzero(self.emitted_per_arrival)) / n

        self._statistics = stats
        return stats

    @staticmethod
    def _compute_array_stats(arr: np.ndarray) -> dict[str, float]:
        """Compute summary statistics for one sequence."""
        values = arr.astype(np.float64)
        return {
            'mean': float(np.mean(values)),
            'std': float(np.std(values)),
            'min': float(np.min(values)),
            'max': float(np.max(values)),
            'median': float(np.median(values)),
            'sum': float(np.sum(values)),
            'count': int(len(values)),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert features to dictionary."""
        result = {
            'sequence_numbers': self.sequence_numbers.tolist(),
            'payload_lengths': self.payload_lengths.tolist(),
            'displacements': self.displacements.tolist(),
            'buffer_depths': self.buffer_depths.tolist(),
            'emitted_per_arrival': self.emitted_per_arrival.tolist(),
        }
        if self._statistics:
            result['statistics'] = self._statistics
        return result


class FeatureExtractor:
    """
    Extracts features from reassembly sessions.

    Examples:
        >>> from llmpkt import FeatureExtractor
        >>> extractor = FeatureExtractor(compute_statistics=True)
        >>> features = extractor.extract(packets)
        >>> features_list = extractor.extract_batch([packets_a, packets_b])
    """

    def __init__(self, compute_statistics: bool = True):
        """
        Initialize the FeatureExtractor.

        Args:
            compute_statistics: Whether to automatically compute statistics
                when extracting features (default: True)
        """
        self.compute_statistics = compute_statistics

    def extract(self, packets: Iterable[PacketRecord | tuple | Mapping[str, Any]]) -> ReassemblyFeatures:
        """Extract features from packets in arrival order."""
        features = ReassemblyFeatures.from_packets(packets)

        if self.compute_statistics:
            features.compute_statistics()

        return features

    def extract_batch(self, sessions: Iterable[Iterable[PacketRecord]]) -> list[ReassemblyFeatures]:
        """Extract features from multiple sessions."""
        return [self.extract(packets) for packets in sessions]

    def extract_to_dict(self, packets: Iterable[PacketRecord | tuple | Mapping[str, Any]]) -> dict[str, Any]:
        """Extract features and return as dictionary."""
        return self.extract(packets).to_dict()
