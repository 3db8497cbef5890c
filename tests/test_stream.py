"""Test streaming reassembly over text chunks."""

import random

import pytest

from llmpkt.core.extractor import PacketExtractor, PacketPattern
from llmpkt.reassembly.engine import PacketReassembler
from llmpkt.reassembly.stream import StreamProgress, StreamReassembler


def split_at(text, cuts):
    """Split text at the given offsets."""
    bounds = [0] + sorted(cuts) + [len(text)]
    return [text[a:b] for a, b in zip(bounds, bounds[1:])]


class TestHandleChunk:
    """Test chunk handling."""

    def test_whole_text_single_chunk(self, canonical_text, canonical_output):
        stream = StreamReassembler()
        progress = stream.handle_chunk(canonical_text)

        assert progress.emitted_count == 5
        assert progress.current_message == ''.join(canonical_output)

    def test_partial_record_kept_pending(self):
        stream = StreamReassembler()
        stream.handle_chunk('intro Packet(sequence_number=0, payl')

        assert stream.engine.emitted_count == 0
        assert stream.pending_text == 'intro Packet(sequence_number=0, payl'

        stream.handle_chunk('oad="Hi")')

        assert stream.engine.message == "Hi"
        assert stream.pending_text == 'intro '

    def test_consumed_text_removed(self):
        stream = StreamReassembler()
        stream.handle_chunk('a Packet(sequence_number=1, payload="y") b ')
        stream.handle_chunk('Packet(sequence_number=0, payload="x") c Packet(sequence_number=2')

        assert stream.pending_text == 'a  b  c Packet(sequence_number=2'
        assert stream.packets_extracted == 2

    def test_records_not_reprocessed(self):
        stream = StreamReassembler()
        stream.handle_chunk('Packet(sequence_number=1, payload="b")')
        stream.handle_chunk(' more text')
        stream.handle_chunk(' and more')

        assert stream.engine.stats['processed'] == 1
        assert stream.engine.buffered_count == 1

    def test_progress_reported_every_chunk(self):
        reports = []
        stream = StreamReassembler(on_progress=reports.append)
        stream.handle_chunk('no packets yet')
        stream.handle_chunk('Packet(sequence_number=1, payload="b")')
        stream.handle_chunk('Packet(sequence_number=0, payload="a")')

        assert [r.emitted_count for r in reports] == [0, 0, 2]
        assert [r.current_message for r in reports] == ["", "", "ab"]
        assert [r.buffered_count for r in reports] == [0, 1, 0]
        assert [r.chunks_received for r in reports] == [1, 2, 3]
        assert isinstance(reports[-1], StreamProgress)

    def test_payload_callback(self, canonical_text, canonical_output):
        seen = []
        stream = StreamReassembler(on_payload_ready=seen.append)
        stream.handle_chunk(canonical_text)

        assert seen == canonical_output

    def test_progress_to_dict(self):
        stream = StreamReassembler()
        progress = stream.handle_chunk('Packet(sequence_number=0, payload="a")')

        assert progress.to_dict() == {
            'emitted_count': 1,
            'current_message': 'a',
            'buffered_count': 0,
            'next_expected_sequence': 1,
            'chunks_received': 1,
        }


class TestStreamingReconstitution:
    """Streaming over any chunking equals the batch result."""

    def test_every_single_cut(self, canonical_text, canonical_packets):
        expected = PacketReassembler()
        expected.process_all(canonical_packets)
        batch_message = expected.finalize()

        for cut in range(len(canonical_text) + 1):
            stream = StreamReassembler()
            for chunk in split_at(canonical_text, [cut]):
                stream.handle_chunk(chunk)
            assert stream.complete() == batch_message

    def test_character_at_a_time(self, canonical_text, canonical_output):
        stream = StreamReassembler()

        assert stream.feed(iter(canonical_text)) == ''.join(canonical_output)

    def test_random_chunkings(self, canonical_text, canonical_output):
        rng = random.Random(1234)
        for _ in range(50):
            cuts = rng.sample(range(1, len(canonical_text)), rng.randint(1, 12))
            stream = StreamReassembler()
            assert stream.feed(split_at(canonical_text, cuts)) == ''.join(canonical_output)

    def test_field_order_mixed_stream(self):
        text = (
            'Packet(payload="world", sequence_number=1) filler '
            'Packet(sequence_number=0, payload="hello ") '
            'Packet(payload="!", seq=2)'
        )
        for cut in range(len(text) + 1):
            stream = StreamReassembler()
            assert stream.feed(split_at(text, [cut])) == "hello world!"

    def test_records_glued_to_prose(self):
        """Chunks are joined without separators, so prose runs into markers."""
        chunks = [
            'Starting challenge generation',
            'Packet(sequence_number=1, payload="Two")',
            'Packet(sequence_number=0, payload="One")',
        ]
        stream = StreamReassembler()

        assert stream.feed(chunks) == "OneTwo"
        assert stream.pending_text == 'Starting challenge generation'


class TestComplete:
    """Test completion."""

    def test_complete_flushes_gap(self):
        stream = StreamReassembler()
        stream.handle_chunk('Packet(sequence_number=0, payload="A")')
        stream.handle_chunk('Packet(sequence_number=2, payload="C")')

        assert stream.complete() == "AC"
        assert stream.get_snapshot().is_complete

    def test_complete_twice(self):
        done = []
        stream = StreamReassembler(on_complete=done.append)
        stream.handle_chunk('Packet(sequence_number=0, payload="A")')

        assert stream.complete() == "A"
        assert stream.complete() == "A"
        assert done == ["A"]

    def test_complete_without_packets(self):
        stream = StreamReassembler()
        stream.handle_chunk("just prose, no packets")

        assert stream.complete() == ""

    def test_chunk_after_complete_warns(self):
        stream = StreamReassembler()
        stream.handle_chunk('Packet(sequence_number=0, payload="A")')
        stream.complete()

        with pytest.warns(RuntimeWarning):
            stream.handle_chunk('Packet(sequence_number=1, payload="B")')

        assert stream.engine.message == "A"


class TestReset:
    """Test adapter reuse."""

    def test_reset_clears_pending_and_engine(self):
        stream = StreamReassembler()
        stream.handle_chunk('Packet(sequence_number=1, payload="b") Packet(seq')
        stream.reset()

        assert stream.pending_text == ''
        assert stream.engine.buffered_count == 0
        assert stream.packets_extracted == 0

        stream.handle_chunk('Packet(sequence_number=0, payload="fresh")')
        assert stream.complete() == "fresh"


class TestCustomExtractor:
    """Test a non-default record shape."""

    def test_custom_pattern(self):
        extractor = PacketExtractor(PacketPattern(markers=('Chunk',), sequence_fields=('n',)))
        stream = StreamReassembler(extractor=extractor)
        stream.handle_chunk('Chunk(n=1, payload="B") Packet(sequence_number=0, payload="no")')
        stream.handle_chunk(' Chunk(payload="A", n=0)')

        assert stream.complete() == "AB"
