"""
Export functionality for packet records.

Provides methods to export extracted packets to various formats including
DataFrame, CSV, JSON, and dict.

Examples:
    Export to pandas DataFrame:
        >>> from llmpkt import extract_packets, to_dataframe
        >>> packets = extract_packets(response_text)
        >>> df = to_dataframe(packets)
        >>> print(df.sort_values('sequence_number')[['sequence_number', 'payload']])

    Export to CSV:
        >>> from llmpkt import to_csv
        >>> to_csv(packets, 'packets.csv')

    Export to JSON:
        >>> from llmpkt import to_json
        >>> to_json(packets, 'packets.json')

    Using RecordExporter class:
        >>> from llmpkt import RecordExporter
        >>> exporter = RecordExporter(include_arrival_index=True)
        >>> exporter.save(packets, 'packets.csv')
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any
import json

if TYPE_CHECKING:
    from llmpkt.core.packet import PacketRecord

_COLUMNS = ['sequence_number', 'payload', 'timestamp', 'id']


def to_dict(packets: list[PacketRecord], include_arrival_index: bool = True) -> list[dict]:
    """
    Convert packets to list of dictionaries.

    Args:
        packets: PacketRecords in arrival order
        include_arrival_index: Add each record's position in the input
            under 'arrival_index' (default: True)

    Returns:
        List of dictionaries representing packets
    """
    result = []

    for index, packet in enumerate(packets):
        row = packet.to_dict()
        if include_arrival_index:
            row['arrival_index'] = index
        result.append(row)

    return result


def to_dataframe(packets: list[PacketRecord], include_arrival_index: bool = True) -> object:
    """
    Convert packets to pandas DataFrame.

    Creates a DataFrame with one row per packet, in arrival order.

    Raises:
        ImportError: If pandas is not installed
    """
    try:
        import pandas as pd
    except ImportError:
        raise ImportError("pandas is required for DataFrame export. Install with: pip install pandas")

    columns = _COLUMNS + (['arrival_index'] if include_arrival_index else [])
    return pd.DataFrame(to_dict(packets, include_arrival_index), columns=columns)


def to_json(
    packets: list[PacketRecord],
    path: str | Path,
    include_arrival_index: bool = True,
    indent: int = 2
) -> None:
    """
    Export packets to JSON file.

    Args:
        packets: PacketRecords in arrival order
        path: Output JSON file path
        include_arrival_index: Whether to include arrival positions
        indent: JSON indentation level (default: 2)
    """
    path = Path(path)

    data = to_dict(packets, include_arrival_index=include_arrival_index)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, default=str)


def to_csv(
    packets: list[PacketRecord],
    path: str | Path,
    include_arrival_index: bool = True
) -> None:
    """
    Export packets to CSV file.

    Raises:
        ImportError: If pandas is not installed
    """
    df = to_dataframe(packets, include_arrival_index=include_arrival_index)
    df.to_csv(path, index=False)


class RecordExporter:
    """
    Helper class for exporting packets in various formats.

    Attributes:
        include_arrival_index: Whether to include arrival positions

    Examples:
        >>> exporter = RecordExporter()
        >>> exporter.save(packets, 'packets.csv')   # CSV
        >>> exporter.save(packets, 'packets.json')  # JSON
    """

    def __init__(self, include_arrival_index: bool = True):
        self.include_arrival_index = include_arrival_index

    def to_dataframe(self, packets: list[PacketRecord]) -> object:
        """Convert packets to pandas DataFrame."""
        return to_dataframe(packets, include_arrival_index=self.include_arrival_index)

    def to_dict(self, packets: list[PacketRecord]) -> list[dict[str, Any]]:
        """Convert packets to list of dictionaries."""
        return to_dict(packets, include_arrival_index=self.include_arrival_index)

    def to_json(self, packets: list[PacketRecord], path: str | Path, indent: int = 2) -> None:
        """Export packets to JSON file."""
        to_json(packets, path, include_arrival_index=self.include_arrival_index, indent=indent)

    def to_csv(self, packets: list[PacketRecord], path: str | Path) -> None:
        """Export packets to CSV file."""
        to_csv(packets, path, include_arrival_index=self.include_arrival_index)

    def save(self, packets: list[PacketRecord], path: str | Path) -> None:
        """
        Save packets to file based on extension.

        Automatically detects the output format from the file extension:
        - .json: JSON format
        - .csv: CSV format (requires pandas)
        - .parquet: Parquet format (requires pyarrow)

        Raises:
            ValueError: If file extension is not supported
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix == '.json':
            self.to_json(packets, path)
        elif suffix == '.csv':
            self.to_csv(packets, path)
        elif suffix == '.parquet':
            df = self.to_dataframe(packets)
            df.to_parquet(path, index=False)
        else:
            raise ValueError(f"Unsupported file extension: {suffix}")
