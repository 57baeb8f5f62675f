"""Keccak-256 hashing over 32-byte words.

The hash and the word encoding must match the on-chain verifier exactly:
values are forced to 32 bytes (left zero-padding, right truncation) and
hashed with Keccak-256 (not NIST SHA3-256).
"""

from Crypto.Hash import keccak

# --- Constants ---

HASH_SIZE = 32


# --- Word Encoding ---

def to_bytes32(value: bytes) -> bytes:
    """Force a value to exactly HASH_SIZE bytes.

    Values of HASH_SIZE bytes or more keep their leading HASH_SIZE bytes.
    Shorter values are left-padded with zero bytes.
    """
    value = bytes(value)
    if len(value) >= HASH_SIZE:
        return value[:HASH_SIZE]
    return bytes(HASH_SIZE - len(value)) + value


# --- Hashing ---

def keccak256(data: bytes) -> bytes:
    """Raw Keccak-256 digest of data."""
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def hash_leaf(value: bytes) -> bytes:
    """Leaf hash: keccak256(to_bytes32(value))."""
    return keccak256(to_bytes32(value))


def hash_node(left: bytes, right: bytes) -> bytes:
    """Inner node hash: keccak256(left32 || right32)."""
    return keccak256(to_bytes32(left) + to_bytes32(right))


# --- Fixed 64-byte Blocks ---

BLOCK64_SIZE = 64


def to_block64(value: bytes) -> bytes:
    """Force a value to exactly BLOCK64_SIZE bytes.

    Unlike to_bytes32, short values are right-padded with zero bytes.
    Longer values keep their leading BLOCK64_SIZE bytes.
    """
    value = bytes(value)
    if len(value) >= BLOCK64_SIZE:
        return value[:BLOCK64_SIZE]
    return value + bytes(BLOCK64_SIZE - len(value))


def hash_block64(value: bytes) -> bytes:
    """Leaf hash of a 64-byte block: keccak256(to_block64(value))."""
    return keccak256(to_block64(value))
