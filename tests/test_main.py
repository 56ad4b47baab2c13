import csv

import pytest

import main
from huffcore.huffman import EOF_SYMBOL, HuffmanCoder, read_code_table


def _make_data(tmp_path):
    data = tmp_path / "data"
    data.mkdir()
    (data / "text.txt").write_bytes(b"abracadabra")
    (data / "blob.bin").write_bytes(bytes(range(256)))
    (data / "empty.bin").write_bytes(b"")
    (data / "desktop.ini").write_bytes(b"ignored")
    return data


def test_measure_writes_table_and_verifies(tmp_path):
    table = tmp_path / "t.code"
    out = main.measure(HuffmanCoder(strict=True), b"aaab", table, verify=True)
    assert out["symbols"] == 3
    assert out["table_size"] == table.stat().st_size
    assert out["encoded_bits"] > 0
    assert "decode_time_ms" in out

    records = dict(read_code_table(table.read_text()))
    assert set(records) == {ord('a'), ord('b'), EOF_SYMBOL}


def test_measure_without_verify_skips_decode(tmp_path):
    out = main.measure(HuffmanCoder(), b"xyz", tmp_path / "t.code", verify=False)
    assert "decode_time_ms" not in out


def test_main_writes_csv_rows(tmp_path, capsys):
    data = _make_data(tmp_path)
    results = tmp_path / "results"
    main.main(["--data", str(data), "--out", str(results), "--verify"])

    with open(results / "results.csv", newline="") as fp:
        rows = list(csv.DictReader(fp))
    assert sorted(r["file"] for r in rows) == ["blob.bin", "empty.bin", "text.txt"]
    assert "decode_time_ms" in rows[0]

    empty = next(r for r in rows if r["file"] == "empty.bin")
    assert empty["encoded_bits"] == "0"
    assert empty["compression_ratio"] == ""
    assert (results / "empty.bin.code").read_text() == "256\n\n"
    assert (results / "text.txt.code").exists()
    assert not (results / "desktop.ini.code").exists()
    assert "Median compression ratio" in capsys.readouterr().out


def test_main_without_verify_notes_skip(tmp_path, capsys):
    data = _make_data(tmp_path)
    main.main(["--data", str(data), "--out", str(tmp_path / "r")])
    assert "[info] Decoding skipped" in capsys.readouterr().out


def test_main_empty_data_dir(tmp_path):
    (tmp_path / "data").mkdir()
    with pytest.raises(SystemExit):
        main.main(["--data", str(tmp_path / "data"), "--out", str(tmp_path / "r")])


def test_measure_reports_round_trip_failure(tmp_path):
    class BrokenCoder(HuffmanCoder):
        def decode(self, table, bits):
            return b"wrong"

    with pytest.raises(ValueError):
        main.measure(BrokenCoder(), b"abc", tmp_path / "t.code", verify=True)
