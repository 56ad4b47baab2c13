#!/usr/bin/env python3
"""
main.py : build a Huffman code table for every file and measure the result

Each file in ./data/ gets a tree built from its byte counts, a text code table
written next to the CSV, and its coded length in bits. With --verify the table
is read back from disk, the trie rebuilt and the bits decoded again.

Usage:
    python main.py                     #Runs on ./data/ without decoding
    python main.py --verify            #Also decodes and checks every file
    python main.py --verify --strict   #Rejects malformed tables while verifying
"""

import argparse
import csv
import mimetypes
import time
import tracemalloc
from pathlib import Path
from statistics import median

from huffcore.huffman import HuffmanCoder, read_code_table

#
#Utility helpers
#

def file_kind(path: Path) -> str:
    mime, _ = mimetypes.guess_type(path)
    return(mime or "binary/unknown").split("/")[0]

def measure(coder, data: bytes, table_path: Path, verify: bool):
    """Encode data with coder, write its code table (and optionally decode).

    Time comes from time.perf_counter and peak memory from tracemalloc, so
    the numbers are unaffected by other processes

    Parameters
    ----------
    coder       : instance with .encode/.decode
    data        : raw bytes to feed in
    table_path  : where the text code table is written
    verify      : if True, we read the table back, decode and compare

    Returns a dict whose keys land directly in the CSV.
    """
    #Encoding pass
    tracemalloc.start()
    t0 = time.perf_counter()
    table, bits = coder.encode(data)
    with open(table_path, "w", newline="\n") as fp:
        fp.write(table)
    t1 = time.perf_counter()
    _, peak_enc = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    out ={
        "symbols": len(read_code_table(table)),
        "table_size": table_path.stat().st_size,
        "encoded_bits": len(bits),
        "encode_time_ms": round((t1-t0)*1000, 3),
        "encode_mem_kb": round(peak_enc/1024, 2),
    }

    #Optional decoding pass
    if verify:
        tracemalloc.start()
        t2 = time.perf_counter()
        decoded = coder.decode(table_path.read_text(), bits)
        t3 = time.perf_counter()
        _, peak_dec = tracemalloc.get_traced_memory()
        tracemalloc.stop()

        #Single byte mismatch means the table or the decoder is wrong.
        if decoded != data:
            raise ValueError(f"{table_path.name}: round-trip failed(data corrupted)")

        out.update(
            decode_time_ms=round((t3-t2)*1000, 3),
            decode_mem_kb=round(peak_dec/1024, 2),
        )

    return out


#
#Main driver
#

def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Build and measure Huffman code tables.")
    parser.add_argument("--data", default="data", help="directory of input files")
    parser.add_argument("--out", default="results", help="directory for code tables and results.csv")
    parser.add_argument(
        "--verify", action="store_true",
        help="additionally rebuilds each table from disk and confirms decode = input"
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="reject out-of-range symbols and non-prefix-free tables while verifying"
    )
    args = parser.parse_args(argv)

    #Discover inputs
    data_dir = Path(args.data)
    files = sorted(data_dir.iterdir()) if data_dir.is_dir() else []
    if not files:
        raise SystemExit(f"No files in {data_dir} to test against.")

    #Prep outputs
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    coder = HuffmanCoder(strict=args.strict)

    header = [
        "file", "type", "symbols", "table_size", "original_bits", "encoded_bits",
        "compression_ratio", "encode_time_ms", "encode_mem_kb",
    ]
    if args.verify:
        header += ["decode_time_ms", "decode_mem_kb"]
    else:
        print("[info] Decoding skipped, use --verify for full round-trip test.")

    #Collect ratios to show the median at the end.
    ratios: list[float] = []

    #Main loop
    with open(out_dir/"results.csv", "w", newline="") as fp:
        writer = csv.DictWriter(fp, fieldnames=header)
        writer.writeheader()

        for path in files:
            if not path.is_file() or path.name.lower() == "desktop.ini":
                continue

            data = path.read_bytes()
            orig_bits = len(data)*8
            try:
                metrics = measure(coder, data, out_dir/f"{path.name}.code", verify=args.verify)
            except Exception as exc:
                #If file fails, skips and continues to next file
                print(f"[warn] {coder.name} failed on {path.name}:{exc}")
                continue

            #Payload only; the table is reported separately
            ratio =(
                round(orig_bits/metrics["encoded_bits"], 3)
                if metrics["encoded_bits"] else None
            )
            row ={
                "file": path.name,
                "type": file_kind(path),
                "symbols": metrics["symbols"],
                "table_size": metrics["table_size"],
                "original_bits": orig_bits,
                "encoded_bits": metrics["encoded_bits"],
                "compression_ratio": ratio,
                "encode_time_ms": metrics["encode_time_ms"],
                "encode_mem_kb": metrics["encode_mem_kb"],
            }
            if args.verify:
                row.update(
                    decode_time_ms=metrics["decode_time_ms"],
                    decode_mem_kb=metrics["decode_mem_kb"],
                )
            writer.writerow(row)

            print(f"\n{path.name}")
            print(f"  symbols {metrics['symbols']} | table {metrics['table_size']} bytes")
            print(f"  ratio {ratio} | time {metrics['encode_time_ms']} ms")
            if ratio is not None:
                ratios.append(ratio)

    #Aggregate summary
    if ratios:
        print(f"\nMedian compression ratio across all test files: {median(ratios):.3f}")

    print(f"\nDone.  Results saved to {out_dir/'results.csv'}")


if __name__ == "__main__":
    main()
