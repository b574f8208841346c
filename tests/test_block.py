import struct

import pytest

from eqminer.block import (
    Block,
    BlockHeader,
    BlockLocator,
    Uint252,
    read_compact_size,
    sha256d,
    uint256_from_hex,
    uint256_to_string,
    write_compact_size,
)

A = bytes([1]) * 32
B = bytes([2]) * 32
C = bytes([3]) * 32
D = bytes([4]) * 32


def test_sha256d_of_empty():
    assert sha256d(b"").hex() == "5df6e0e2761359d30a8275058e299fcc0381534545f55cf43e41983f5d4c9456"


def test_hex_round_trip():
    text = "0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f0f"
    assert uint256_to_string(uint256_from_hex(text)) == text


def test_hex_is_little_endian_internally():
    value = uint256_from_hex("01")
    assert value[0] == 1
    assert value[1:] == bytes(31)


def test_hex_prefix_and_whitespace_ignored():
    assert uint256_from_hex("  0xab") == uint256_from_hex("ab")


def test_hex_stops_at_non_hex():
    assert uint256_from_hex("12zz34") == uint256_from_hex("12")


@pytest.mark.parametrize("size", [0, 252, 253, 0xFFFF, 0x10000, 0xFFFFFFFF, 0x100000000])
def test_compact_size_round_trip(size):
    encoded = write_compact_size(size)
    assert read_compact_size(encoded) == (size, len(encoded))


def test_compact_size_boundary_encoding():
    assert write_compact_size(252) == b"\xfc"
    assert write_compact_size(253) == b"\xfd\xfd\x00"


def test_compact_size_truncated():
    with pytest.raises(ValueError):
        read_compact_size(b"\xfd\x01")


def test_uint252_rejects_leading_bits():
    with pytest.raises(ValueError):
        Uint252(b"\xf0" + bytes(31))


def test_uint252_deserialize_rejects_leading_bits():
    with pytest.raises(ValueError):
        Uint252.deserialize(b"\x10" + bytes(31))


def test_uint252_round_trip():
    value = Uint252(b"\x0f" + bytes(range(31)))
    assert Uint252.deserialize(value.serialize()) == value
    assert value.inner == b"\x0f" + bytes(range(31))


def test_header_serialized_length():
    header = BlockHeader()
    assert len(header.serialize()) == BlockHeader.HEADER_SIZE + 1
    assert len(header.equihash_input()) == BlockHeader.HEADER_SIZE - 32


def test_header_round_trip():
    header = BlockHeader(version=4, hash_prev_block=A, hash_merkle_root=B, hash_reserved=C,
                         time=1_480_000_000, bits=0x1F07FFFF, nonce=D, solution=bytes(range(256)) * 5)
    assert BlockHeader.deserialize(header.serialize()) == header


def test_equihash_input_is_prefix():
    header = BlockHeader(time=7, bits=9, nonce=A, solution=b"xyz")
    assert header.serialize().startswith(header.equihash_input())
    assert header.serialize()[len(header.equihash_input()):][:32] == A


def test_header_fields_little_endian():
    header = BlockHeader(version=4, time=5, bits=6)
    data = header.serialize()
    assert struct.unpack_from("<i", data, 0)[0] == 4
    assert struct.unpack_from("<II", data, 100) == (5, 6)


def test_header_truncated():
    with pytest.raises(ValueError):
        BlockHeader.deserialize(BlockHeader().serialize()[:50])


def test_header_bad_hash_length():
    with pytest.raises(ValueError):
        BlockHeader(nonce=b"short")


def test_header_hash_depends_on_nonce():
    assert BlockHeader(nonce=A).get_hash() != BlockHeader(nonce=B).get_hash()
    assert BlockHeader(nonce=A).get_hash() == sha256d(BlockHeader(nonce=A).serialize())


def test_is_null_and_time():
    assert BlockHeader().is_null() is True
    header = BlockHeader(bits=1, time=42)
    assert header.is_null() is False
    assert header.block_time() == 42


def test_block_header_extraction():
    block = Block(time=3, bits=4, nonce=A, tx_hashes=[B])
    assert block.header() == BlockHeader(time=3, bits=4, nonce=A)
    assert block.header().get_hash() == block.get_hash()


def test_merkle_empty():
    assert Block().build_merkle_tree() == (bytes(32), False)


def test_merkle_single():
    assert Block(tx_hashes=[A]).build_merkle_tree() == (A, False)


def test_merkle_odd_duplicates_last():
    root, mutated = Block(tx_hashes=[A, B, C]).build_merkle_tree()
    assert root == sha256d(sha256d(A + B) + sha256d(C + C))
    assert mutated is False


def test_merkle_mutation_detected():
    root, mutated = Block(tx_hashes=[A, B, C, C]).build_merkle_tree()
    assert mutated is True
    assert root == Block(tx_hashes=[A, B, C]).build_merkle_tree()[0]


@pytest.mark.parametrize("count", [1, 2, 3, 5, 8])
def test_merkle_branches_verify(count):
    hashes = [bytes([i + 1]) * 32 for i in range(count)]
    block = Block(tx_hashes=hashes)
    root, _ = block.build_merkle_tree()
    for index, tx in enumerate(hashes):
        branch = block.get_merkle_branch(index)
        assert Block.check_merkle_branch(tx, branch, index) == root


def test_merkle_branch_index_minus_one():
    assert Block.check_merkle_branch(A, [B], -1) == bytes(32)


def test_block_str():
    block = Block(bits=0x1F, tx_hashes=[A, B])
    block.build_merkle_tree()
    text = str(block)
    assert text.startswith("CBlock(hash=" + uint256_to_string(block.get_hash()))
    assert "vtx=2" in text
    assert text.count(uint256_to_string(A)) == 1
    assert text.endswith("\n")


def test_locator_serialize():
    locator = BlockLocator([A, B])
    data = locator.serialize(170002)
    assert struct.unpack_from("<i", data)[0] == 170002
    assert data[4:] == locator.serialize(170002, for_hash=True)
    assert data[4:] == b"\x02" + A + B


def test_locator_is_null():
    assert BlockLocator().is_null() is True
    assert BlockLocator([A]).is_null() is False