from huffcore.bitio import EXHAUSTED, BitSink, BitSource


def test_source_reads_string_then_reports_exhaustion():
    src = BitSource("0110")
    assert [src.read_bit() for _ in range(4)] == [0, 1, 1, 0]
    assert src.read_bit() == EXHAUSTED
    assert src.read_bit() == EXHAUSTED
    assert src.remaining == 0


def test_source_masks_int_bits():
    src = BitSource([1, 0, 3])
    assert src.remaining == 3
    assert [src.read_bit() for _ in range(3)] == [1, 0, 1]


def test_empty_source():
    assert BitSource().read_bit() == EXHAUSTED


def test_sink_collects_bits_and_codes():
    sink = BitSink()
    sink.put(1)
    sink.extend("010")
    sink.put(2)
    assert sink.bits == [1, 0, 1, 0, 0]
    assert sink.to01() == "10100"
    assert len(sink) == 5
