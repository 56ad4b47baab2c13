from __future__ import annotations

"""
Tree-coded Huffman codec

Builds a Huffman tree from byte frequencies plus an end-of-stream sentinel,
writes each leaf's code as a plain-text table, rebuilds the decoding trie from
such a table and walks it bit by bit to recover the original bytes.

Equal weights are merged in creation order (leaves by ascending symbol, then the
sentinel, then internal nodes as they are made), so a given frequency table
always produces the same tree and the same table.
"""

import re
from collections import Counter
from heapq import heapify, heappop, heappush
from io import StringIO
from itertools import count
from typing import (Dict, Iterable, List, Mapping, MutableSequence, Sequence, TextIO,
                    Tuple)

from huffcore.bitio import EXHAUSTED, BitSink, BitSource

ALPHABET_SIZE = 256
EOF_SYMBOL = 256

#Symbol value a hand-written table uses for "no value"; the node stays unassigned
NO_VALUE = -1

_SYMBOL_LINE = re.compile(r"-?[0-9]+")

Record = Tuple[int, str]


class CodeTableError(ValueError):
    """Raised for a code table that cannot be parsed or fails strict checks."""


class DecodeError(ValueError):
    """Raised when a bitstream leads off the decoding trie."""


#
#Tree node(shared by the encode-side tree and the decode-side trie)
#

class _Node:
    """Represents a node in the Huffman tree (leaf or internal).

    symbol is None for internal nodes and for trie nodes no code has reached yet.
    weight and order only matter while the encode-side tree is being merged.
    """
    __slots__ =("weight", "order", "symbol", "left", "right")

    def __init__(self, weight: int | None = None, symbol: int | None = None,
                 left: "_Node | None" = None, right: "_Node | None" = None,
                 order: int = 0):
        self.weight, self.symbol, self.left, self.right = weight, symbol, left, right
        self.order = order

    def __lt__(self, other: "_Node") -> bool:
        return(self.weight, self.order) <(other.weight, other.order)

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


class HuffmanTree:
    """A finalized encode-side tree. Weights are gone; only the shape is kept."""

    __slots__ =("root",)

    def __init__(self, root: _Node):
        self.root = root

    def leaves(self) -> List[int]:
        return [sym for sym, _ in code_records(self)]


#
#Tree construction
#

def build_tree(counts: Sequence[int] | Mapping[int, int]) -> HuffmanTree:
    """Build the encode-side tree from a frequency table.

    counts is either a list indexed by byte value or a mapping such as a
    Counter over bytes. The sentinel is always added with weight 1, so any
    non-empty table gives at least two leaves; an all-zero table gives the
    sentinel alone.
    """
    items = counts.items() if isinstance(counts, Mapping) else enumerate(counts)
    freq: Dict[int, int] = {}
    for sym, n in items:
        if not 0 <= sym < ALPHABET_SIZE:
            raise ValueError(f"symbol {sym} outside 0..{ALPHABET_SIZE-1}")
        if n < 0:
            raise ValueError(f"negative count {n} for symbol {sym}")
        if n > 0:
            freq[sym] = n

    seq = count()
    heap: List[_Node] = [_Node(freq[s], s, order=next(seq)) for s in sorted(freq)]
    heap.append(_Node(1, EOF_SYMBOL, order=next(seq)))
    heapify(heap)

    #First popped goes left, second goes right
    while len(heap) > 1:
        n1, n2 = heappop(heap), heappop(heap)
        heappush(heap, _Node(n1.weight+n2.weight, None, n1, n2, order=next(seq)))

    root = heap[0]
    _clear_weights(root)
    return HuffmanTree(root)


def _clear_weights(node: _Node) -> None:
    node.weight = None
    if node.left is not None:
        _clear_weights(node.left)
    if node.right is not None:
        _clear_weights(node.right)


#
#Code table output
#

def code_records(tree: HuffmanTree) -> List[Record]:
    """Depth-first, left before right: one (symbol, code) record per leaf."""
    out: List[Record] = []

    def walk(node: _Node | None, prefix: str) -> None:
        if node is None:
            return
        if node.symbol is not None:
            out.append((node.symbol, prefix))
            return
        walk(node.left,  prefix+"0")
        walk(node.right, prefix+"1")

    walk(tree.root, "")
    return out


def code_map(tree: HuffmanTree) -> Dict[int, str]:
    return dict(code_records(tree))


def write_code_table(records: Iterable[Record], fp: TextIO) -> None:
    for sym, code in records:
        fp.write(f"{sym}\n{code}\n")


def dumps_code_table(records: Iterable[Record]) -> str:
    buf = StringIO()
    write_code_table(records, buf)
    return buf.getvalue()


#
#Code table input and trie reconstruction
#

def read_code_table(source: TextIO | str) -> List[Record]:
    """Parse two-line records until the input runs out.

    A final symbol line with no code line after it gets the empty code.
    """
    text = source if isinstance(source, str) else source.read()
    lines = text.splitlines()
    records: List[Record] = []
    for i in range(0, len(lines), 2):
        raw = lines[i]
        if not _SYMBOL_LINE.fullmatch(raw):
            raise CodeTableError(f"line {i+1}: bad symbol {raw!r}")
        sym = int(raw)
        code = lines[i+1] if i+1 < len(lines) else ""
        records.append((sym, code))
    return records


def rebuild_trie(records: Iterable[Record], strict: bool = False) -> _Node:
    """Rebuild the decoding trie from (symbol, code) records.

    Without strict, the table is trusted the way the encoder wrote it: any
    character other than '0' goes right and a later record silently overwrites
    an earlier one at the same node. A NO_VALUE symbol leaves its node
    unassigned. strict rejects out-of-range symbols, bad code characters,
    duplicate symbols and codes that are prefixes of others.
    """
    root = _Node()
    seen: set[int] = set()
    for sym, code in records:
        if strict:
            _check_record(sym, code, seen)
        node = root
        for c in code:
            if strict and node.symbol is not None:
                raise CodeTableError(
                    f"code {code!r} for {sym} extends the code of {node.symbol}")
            if c == "0":
                if node.left is None:
                    node.left = _Node()
                node = node.left
            else:
                if node.right is None:
                    node.right = _Node()
                node = node.right
        if strict and (node.symbol is not None or not node.is_leaf):
            raise CodeTableError(f"code {code!r} for {sym} collides with another code")
        node.symbol = None if sym == NO_VALUE else sym
    return root


def _check_record(sym: int, code: str, seen: set[int]) -> None:
    if not 0 <= sym <= EOF_SYMBOL:
        raise CodeTableError(f"symbol {sym} outside 0..{EOF_SYMBOL}")
    if code.strip("01"):
        raise CodeTableError(f"code {code!r} for {sym} is not a bit string")
    if sym in seen:
        raise CodeTableError(f"symbol {sym} listed twice")
    seen.add(sym)


#
#Decoding
#

def decode(root: _Node, source: BitSource,
           sink: MutableSequence[int] | None = None) -> MutableSequence[int]:
    """Walk the trie with bits from source, appending each byte to sink.

    A completed symbol is noticed on the step after it is reached, so the bit
    that follows it is already read and becomes the first move of the next
    code. Stops on EOF_SYMBOL (never emitted) or when the source runs dry,
    even mid-code. Returns the sink, a new bytearray by default.

    Symbols outside 0..255 other than EOF_SYMBOL only come from a hand-made
    table; they are emitted as their low 8 bits.
    """
    out = bytearray() if sink is None else sink
    node = root
    r = source.read_bit()

    while node.symbol != EOF_SYMBOL and r != EXHAUSTED:
        if node.symbol is not None:
            out.append(node.symbol & 0xFF)
            node = root

        nxt = node.left if r == 0 else node.right
        if nxt is None:
            raise DecodeError(f"bit {r} has no branch in the code table")
        node = nxt

        r = source.read_bit()

    return out


#
#Encoding
#

def encode_symbols(data: Iterable[int], codes: Mapping[int, str],
                   sink: BitSink | None = None) -> BitSink:
    #Stream always ends with the sentinel code
    out = BitSink() if sink is None else sink
    for b in data:
        out.extend(codes[b])
    out.extend(codes[EOF_SYMBOL])
    return out


#
#Main coder interface
#

class HuffmanCoder:
    """Whole-buffer Huffman coder that carries its code table as text.

    encode returns the table text and the coded bits; decode needs both.
    """

    name = "Huffman"

    def __init__(self, strict: bool = False):
        self.strict = strict

    def encode(self, data: bytes) -> Tuple[str, BitSink]:
        tree = build_tree(Counter(data))
        records = code_records(tree)
        bits = encode_symbols(data, dict(records))
        return dumps_code_table(records), bits

    def decode(self, table: str, bits: BitSink | Iterable[int] | str) -> bytes:
        root = rebuild_trie(read_code_table(table), strict=self.strict)
        src = BitSource(bits.bits if isinstance(bits, BitSink) else bits)
        return bytes(decode(root, src))

