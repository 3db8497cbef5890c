"""Feature extraction modules."""

from llmpkt.features.extractor import FeatureExtractor, ReassemblyFeatures

__all__ = [
    'FeatureExtractor',
    'ReassemblyFeatures',
]
