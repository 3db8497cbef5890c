"""Core llmpkt modules."""

from llmpkt.core.packet import PacketRecord
from llmpkt.core.extractor import (
    PacketExtractor,
    PacketMatch,
    PacketPattern,
    extract_packets,
    find_packets,
    parse_packet_string,
    get_default_extractor
)

__all__ = [
    'PacketRecord',
    'PacketExtractor',
    'PacketMatch',
    'PacketPattern',
    'extract_packets',
    'find_packets',
    'parse_packet_string',
    'get_default_extractor',
]
