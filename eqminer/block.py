"""Block headers, blocks, locators and their wire serialisation."""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, field, fields
from string import hexdigits

_ZERO_HASH = bytes(32)


def sha256d(data: bytes) -> bytes:
    """Return SHA-256 applied twice."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def uint256_to_string(data: bytes) -> str:
    """Show a 256-bit number stored little-endian as big-endian hex."""
    return bytes(reversed(data)).hex()


def uint256_from_hex(text: str) -> bytes:
    """Parse big-endian hex into 32 little-endian bytes.

    Leading whitespace and a ``0x`` prefix are skipped; parsing stops at the
    first non-hex character and only the last 64 digits are kept.
    """
    text = text.lstrip()
    if text[:2].lower() == "0x":
        text = text[2:]
    end = 0
    while end < len(text) and text[end] in hexdigits:
        end += 1
    digits = text[:end][-64:].rjust(64, "0")
    return bytes(reversed(bytes.fromhex(digits)))


def write_compact_size(size: int) -> bytes:
    """Encode a length as a variable-size prefix."""
    if size < 0:
        raise ValueError("size must not be negative")
    if size < 253:
        return bytes([size])
    if size <= 0xFFFF:
        return b"\xfd" + struct.pack("<H", size)
    if size <= 0xFFFFFFFF:
        return b"\xfe" + struct.pack("<I", size)
    return b"\xff" + struct.pack("<Q", size)


def _take(data: bytes, offset: int, count: int) -> bytes:
    chunk = bytes(data[offset:offset + count])
    if len(chunk) != count:
        raise ValueError("end of data")
    return chunk


def read_compact_size(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a length prefix; return the length and the offset after it."""
    first = _take(data, offset, 1)[0]
    offset += 1
    if first < 253:
        return first, offset
    fmt, width = {253: ("<H", 2), 254: ("<I", 4), 255: ("<Q", 8)}[first]
    (size,) = struct.unpack(fmt, _take(data, offset, width))
    return size, offset + width


def _check_hash(name: str, value: bytes) -> bytes:
    value = bytes(value)
    if len(value) != 32:
        raise ValueError(f"{name} must be 32 bytes, got {len(value)}")
    return value


class Uint252:
    """A 256-bit value whose first stored byte has its top four bits clear."""

    __slots__ = ("_contents",)

    def __init__(self, contents: bytes = _ZERO_HASH) -> None:
        contents = _check_hash("contents", contents)
        if contents[0] & 0xF0:
            raise ValueError("leading bits are set in argument given to uint252 constructor")
        self._contents = contents

    @property
    def inner(self) -> bytes:
        return self._contents

    def serialize(self) -> bytes:
        return self._contents

    @classmethod
    def deserialize(cls, data: bytes) -> "Uint252":
        contents = _take(data, 0, 32)
        if contents[0] & 0xF0:
            raise ValueError("spending key has invalid leading bits")
        return cls(contents)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Uint252):
            return NotImplemented
        return self._contents == other._contents

    def __hash__(self) -> int:
        return hash(self._contents)

    def __repr__(self) -> str:
        return f"Uint252({uint256_to_string(self._contents)})"


_HASH_FIELDS = ("hash_prev_block", "hash_merkle_root", "hash_reserved", "nonce")


@dataclass
class BlockHeader:
    """A block header with its Equihash nonce and solution."""

    HEADER_SIZE = 4 + 32 + 32 + 32 + 4 + 4 + 32
    CURRENT_VERSION = 4

    version: int = CURRENT_VERSION
    hash_prev_block: bytes = _ZERO_HASH
    hash_merkle_root: bytes = _ZERO_HASH
    hash_reserved: bytes = _ZERO_HASH
    time: int = 0
    bits: int = 0
    nonce: bytes = _ZERO_HASH
    solution: bytes = b""

    def __post_init__(self) -> None:
        for name in _HASH_FIELDS:
            setattr(self, name, _check_hash(name, getattr(self, name)))
        self.solution = bytes(self.solution)

    def equihash_input(self) -> bytes:
        """Serialise the header without nonce and solution."""
        return (
            struct.pack("<i", self.version)
            + self.hash_prev_block
            + self.hash_merkle_root
            + self.hash_reserved
            + struct.pack("<II", self.time, self.bits)
        )

    def serialize(self) -> bytes:
        return (
            self.equihash_input()
            + self.nonce
            + write_compact_size(len(self.solution))
            + self.solution
        )

    @classmethod
    def deserialize(cls, data: bytes) -> "BlockHeader":
        """Read a header from the start of ``data``; trailing bytes are ignored."""
        (version,) = struct.unpack("<i", _take(data, 0, 4))
        offset = 4
        hashes = []
        for _ in range(3):
            hashes.append(_take(data, offset, 32))
            offset += 32
        time, bits = struct.unpack("<II", _take(data, offset, 8))
        offset += 8
        nonce = _take(data, offset, 32)
        offset += 32
        length, offset = read_compact_size(data, offset)
        solution = _take(data, offset, length)
        return cls(version, *hashes, time, bits, nonce, solution)

    def get_hash(self) -> bytes:
        return sha256d(self.serialize())

    def is_null(self) -> bool:
        return self.bits == 0

    def block_time(self) -> int:
        return self.time


@dataclass
class Block(BlockHeader):
    """A header plus the hashes of its transactions, in order."""

    tx_hashes: list[bytes] = field(default_factory=list)
    merkle_tree: list[bytes] = field(default_factory=list, repr=False, compare=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        self.tx_hashes = [_check_hash("transaction hash", h) for h in self.tx_hashes]

    def header(self) -> BlockHeader:
        return BlockHeader(**{f.name: getattr(self, f.name) for f in fields(BlockHeader)})

    def build_merkle_tree(self) -> tuple[bytes, bool]:
        """Build the merkle tree; return the root and whether mutation was detected.

        Mutation means two identical hashes were paired at the end of a level.
        """
        tree = list(self.tx_hashes)
        mutated = False
        start = 0
        size = len(self.tx_hashes)
        while size > 1:
            for i in range(0, size, 2):
                i2 = min(i + 1, size - 1)
                left, right = tree[start + i], tree[start + i2]
                if i2 == i + 1 and i2 + 1 == size and left == right:
                    mutated = True
                tree.append(sha256d(left + right))
            start += size
            size = (size + 1) // 2
        self.merkle_tree = tree
        return (tree[-1] if tree else _ZERO_HASH), mutated

    def get_merkle_branch(self, index: int) -> list[bytes]:
        if not self.merkle_tree:
            self.build_merkle_tree()
        branch = []
        start = 0
        size = len(self.tx_hashes)
        while size > 1:
            branch.append(self.merkle_tree[start + min(index ^ 1, size - 1)])
            index >>= 1
            start += size
            size = (size + 1) // 2
        return branch

    @staticmethod
    def check_merkle_branch(hash_value: bytes, branch: list[bytes], index: int) -> bytes:
        """Fold a branch onto a leaf hash to recompute the merkle root."""
        if index == -1:
            return _ZERO_HASH
        for sibling in branch:
            if index & 1:
                hash_value = sha256d(sibling + hash_value)
            else:
                hash_value = sha256d(hash_value + sibling)
            index >>= 1
        return hash_value

    def __str__(self) -> str:
        head = (
            f"CBlock(hash={uint256_to_string(self.get_hash())}, ver={self.version}, "
            f"hashPrevBlock={uint256_to_string(self.hash_prev_block)}, "
            f"hashMerkleRoot={uint256_to_string(self.hash_merkle_root)}, "
            f"hashReserved={uint256_to_string(self.hash_reserved)}, "
            f"nTime={self.time}, nBits={self.bits:08x}, "
            f"nNonce={uint256_to_string(self.nonce)}, vtx={len(self.tx_hashes)})\n"
        )
        tree = "".join(" " + uint256_to_string(h) for h in self.merkle_tree)
        return head + "  vMerkleTree: " + tree + "\n"


@dataclass
class BlockLocator:
    """Block hashes describing a position in the chain."""

    have: list[bytes] = field(default_factory=list)

    def serialize(self, version: int, for_hash: bool = False) -> bytes:
        """Serialise; the version prefix is left out when hashing."""
        prefix = b"" if for_hash else struct.pack("<i", version)
        body = b"".join(_check_hash("locator hash", h) for h in self.have)
        return prefix + write_compact_size(len(self.have)) + body

    def is_null(self) -> bool:
        return not self.have