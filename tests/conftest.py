"""Configuration and fixtures for pytest tests."""

import pytest
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


CANONICAL_TEXT = '''
**Example Input:**
Packet(sequence_number=2, payload="world!")
Packet(sequence_number=0, payload="Hello,")
Packet(sequence_number=4, payload="How")
Packet(sequence_number=1, payload=" beautiful")
Packet(sequence_number=3, payload=" are you?")

**Expected Output:**
["Hello,", " beautiful", "world!", " are you?", "How"]
'''

CANONICAL_OUTPUT = ["Hello,", " beautiful", "world!", " are you?", "How"]


@pytest.fixture
def canonical_packets():
    """Provide the canonical out-of-order packets, in arrival order."""
    from llmpkt.core.packet import PacketRecord
    return [
        PacketRecord(sequence_number=2, payload="world!"),
        PacketRecord(sequence_number=0, payload="Hello,"),
        PacketRecord(sequence_number=4, payload="How"),
        PacketRecord(sequence_number=1, payload=" beautiful"),
        PacketRecord(sequence_number=3, payload=" are you?"),
    ]


@pytest.fixture
def canonical_text():
    """Provide model output embedding the canonical packets."""
    return CANONICAL_TEXT


@pytest.fixture
def canonical_output():
    """Provide the expected emission order for the canonical packets."""
    return list(CANONICAL_OUTPUT)
