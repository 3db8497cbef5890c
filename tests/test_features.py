"""Test reassembly feature extraction."""

import numpy as np
import pytest

from llmpkt.core.packet import PacketRecord
from llmpkt.features.extractor import FeatureExtractor, ReassemblyFeatures


def test_features_init():
    """Test ReassemblyFeatures initialization."""
    features = ReassemblyFeatures()
    assert len(features.sequence_numbers) == 0
    assert len(features.buffer_depths) == 0
    assert features.packet_count == 0


def test_features_from_canonical(canonical_packets):
    features = ReassemblyFeatures.from_packets(canonical_packets)

    np.testing.assert_array_equal(features.sequence_numbers, [2, 0, 4, 1, 3])
    np.testing.assert_array_equal(features.payload_lengths, [6, 6, 3, 10, 9])
    np.testing.assert_array_equal(features.displacements, [-2, 1, -2, 2, 1])
    np.testing.assert_array_equal(features.buffer_depths, [1, 1, 2, 1, 0])
    np.testing.assert_array_equal(features.emitted_per_arrival, [0, 1, 0, 2, 2])


def test_statistics(canonical_packets):
    features = ReassemblyFeatures.from_packets(canonical_packets)
    stats = features.compute_statistics()

    assert stats['packet_count'] == 5
    assert stats['duplicate_count'] == 0
    assert stats['gap_count'] == 0
    assert stats['max_buffer_depth'] == 2
    assert stats['in_order_ratio'] == pytest.approx(0.6)
    assert stats['payload_lengths']['sum'] == 34
    assert stats['displacements']['mean'] == pytest.approx(0.0)
    assert stats['buffer_depths']['count'] == 5


def test_in_order_stream():
    packets = [PacketRecord(i, "x") for i in range(4)]
    stats = ReassemblyFeatures.from_packets(packets).compute_statistics()

    assert stats['in_order_ratio'] == 1.0
    assert stats['max_buffer_depth'] == 0
    assert stats['displacements']['max'] == 0.0


def test_gaps_and_duplicates():
    packets = [PacketRecord(0, "a"), PacketRecord(3, "d"), PacketRecord(3, "d"), PacketRecord(5, "f")]
    stats = ReassemblyFeatures.from_packets(packets).compute_statistics()

    assert stats['duplicate_count'] == 1
    assert stats['gap_count'] == 3  # 1, 2 and 4


def test_empty_statistics():
    stats = ReassemblyFeatures().compute_statistics()

    assert stats['packet_count'] == 0
    assert stats['gap_count'] == 0
    assert stats['in_order_ratio'] == 0.0
    assert 'payload_lengths' not in stats


def test_to_dict(canonical_packets):
    features = FeatureExtractor(compute_statistics=True).extract(canonical_packets)
    data = features.to_dict()

    assert data['sequence_numbers'] == [2, 0, 4, 1, 3]
    assert 'statistics' in data
    assert data['statistics']['packet_count'] == 5


def test_extractor_without_statistics(canonical_packets):
    features = FeatureExtractor(compute_statistics=False).extract(canonical_packets)

    assert 'statistics' not in features.to_dict()


def test_extract_batch(canonical_packets):
    extractor = FeatureExtractor()
    results = extractor.extract_batch([canonical_packets, canonical_packets[:1]])

    assert len(results) == 2
    assert results[1].packet_count == 1


def test_extract_to_dict_accepts_tuples():
    data = FeatureExtractor().extract_to_dict([(1, "b"), (0, "a")])

    assert data['emitted_per_arrival'] == [0, 2]
