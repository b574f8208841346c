"""Equihash solutions, stratum jobs and the compact solution encoding."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from eqminer.block import BlockHeader, uint256_from_hex, uint256_to_string, write_compact_size

MINER_VERSION = "0.4b"

PROTOCOL_VERSION = 170002
INIT_PROTO_VERSION = 209
GETHEADERS_VERSION = 31800
MIN_PEER_PROTO_VERSION = 170002
CADDR_TIME_VERSION = 31402
NOBLKS_VERSION_START = 32000
NOBLKS_VERSION_END = 32400
BIP0031_VERSION = 60000
MEMPOOL_GD_VERSION = 60002

DEFAULT_TARGET_HEX = "0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f"

_INDEX_BYTES = 4


def compress_array(data: bytes, out_len: int, bit_len: int, byte_pad: int = 0) -> bytes:
    """Pack big-endian ``bit_len``-bit elements tightly into ``out_len`` bytes.

    Each input element occupies ``(bit_len + 7) // 8 + byte_pad`` bytes, of
    which the first ``byte_pad`` are skipped.
    """
    if bit_len < 8:
        raise ValueError("bit_len must be at least 8")
    if 8 * _INDEX_BYTES < 7 + bit_len:
        raise ValueError("bit_len too large")
    in_width = (bit_len + 7) // 8 + byte_pad
    if out_len != bit_len * len(data) // (8 * in_width):
        raise ValueError("output length does not match input length")

    mask = (1 << bit_len) - 1
    acc_bits = 0
    acc_value = 0
    position = 0
    out = bytearray()
    for _ in range(out_len):
        if acc_bits < 8:
            acc_value = (acc_value << bit_len) & 0xFFFFFFFF
            for x in range(byte_pad, in_width):
                shift = 8 * (in_width - x - 1)
                acc_value |= (data[position + x] & ((mask >> shift) & 0xFF)) << shift
            position += in_width
            acc_bits += bit_len
        acc_bits -= 8
        out.append((acc_value >> acc_bits) & 0xFF)
    return bytes(out)


def get_minimal_from_indices(indices: list[int], c_bit_len: int) -> bytes:
    """Encode solution indices in the minimal form of ``c_bit_len + 1`` bits each."""
    if ((c_bit_len + 1) + 7) // 8 > _INDEX_BYTES:
        raise ValueError("collision bit length too large for 32-bit indices")
    len_indices = len(indices) * _INDEX_BYTES
    min_len = (c_bit_len + 1) * len_indices // (8 * _INDEX_BYTES)
    byte_pad = _INDEX_BYTES - ((c_bit_len + 1) + 7) // 8
    array = b"".join((index & 0xFFFFFFFF).to_bytes(_INDEX_BYTES, "big") for index in indices)
    return compress_array(array, min_len, c_bit_len + 1, byte_pad)


@dataclass
class EquihashSolution:
    """A found solution: the full nonce, the encoded solution and job data."""

    nonce: bytes
    solution: bytes
    time: str
    nonce1_size: int

    def __post_init__(self) -> None:
        self.nonce = bytes(self.nonce)
        if len(self.nonce) != 32:
            raise ValueError("nonce must be 32 bytes")
        self.solution = bytes(self.solution)

    def __str__(self) -> str:
        return uint256_to_string(self.nonce)

    def serialize(self) -> bytes:
        """Serialise the nonce followed by the length-prefixed solution."""
        return self.nonce + write_compact_size(len(self.solution)) + self.solution


def _target_from_hex(text: str) -> int:
    return int.from_bytes(uint256_from_hex(text), "little")


@dataclass(eq=False)
class ZcashJob:
    """A unit of work received from the pool."""

    job: str = ""
    header: BlockHeader = field(default_factory=BlockHeader)
    time: str = ""
    nonce1_size: int = 0
    nonce2_space: int = 0
    nonce2_inc: int = 0
    server_target: int = 0
    clean: bool = False

    @property
    def job_id(self) -> str:
        return self.job

    @property
    def clean_jobs(self) -> bool:
        return self.clean

    def clone(self) -> "ZcashJob":
        """Return an independent copy."""
        return copy.deepcopy(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ZcashJob):
            return NotImplemented
        return self.job == other.job

    def __hash__(self) -> int:
        return hash(self.job)

    def set_target(self, target: str) -> None:
        """Set the share target from hex; empty means the default limit."""
        self.server_target = _target_from_hex(target if target else DEFAULT_TARGET_HEX)

    def get_submission(self, solution: EquihashSolution) -> str:
        """Return the quoted, comma-separated stratum submission values."""
        hex_data = solution.serialize().hex()
        return (
            f'"{self.job}","{self.time}",'
            f'"{hex_data[self.nonce1_size:64]}","{hex_data[64:]}"'
        )