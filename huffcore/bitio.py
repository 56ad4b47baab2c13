from __future__ import annotations

"""
In-memory bit containers

BitSource feeds the decoder one bit at a time and reports exhaustion with
EXHAUSTED instead of padding. BitSink collects the bits written by the encoder.
Neither packs bits into bytes; callers that need a byte layout do it themselves.
"""

from typing import Iterable, List

#Returned by BitSource.read_bit once every bit has been consumed
EXHAUSTED = -1


class BitSource:
    #Read bits one at a time from a list of 0/1 values or a "0101" string.

    __slots__ =("bits", "idx")

    def __init__(self, bits: Iterable[int] | str = ()):
        if isinstance(bits, str):
            self.bits: List[int] = [0 if c == "0" else 1 for c in bits]
        else:
            self.bits = [b & 1 for b in bits]
        self.idx = 0

    def read_bit(self) -> int:
        if self.idx >= len(self.bits):
            return EXHAUSTED
        bit = self.bits[self.idx]
        self.idx += 1
        return bit

    @property
    def remaining(self) -> int:
        return len(self.bits)-self.idx


class BitSink:
    #Collect bits written one at a time or a whole code string at once.

    __slots__ =("bits",)

    def __init__(self):
        self.bits: List[int] = []

    def put(self, bit: int):
        self.bits.append(bit & 1)

    def extend(self, code: str):
        self.bits.extend(0 if c == "0" else 1 for c in code)

    def to01(self) -> str:
        return "".join("1" if b else "0" for b in self.bits)

    def __len__(self) -> int:
        return len(self.bits)
