"""Splitting byte strings into accumulator values.

A ciphertext is committed block by block: its IV first, then fixed-size
data blocks, so that single blocks can later be opened with a multi-proof.
"""

from dataclasses import dataclass
from typing import List

from merkle_accumulator.errors import ConstructionError
from merkle_accumulator.keccak import BLOCK64_SIZE, hash_block64, hash_leaf
from merkle_accumulator.merkle_tree import LeafHash, MerkleRoot, accumulate, accumulate_fixed64


@dataclass(frozen=True)
class BlockConfig:
    """Ciphertext layout.

    Attributes:
        block_size: Bytes per data block
        iv_size: Bytes of IV at the start of the ciphertext
    """

    block_size: int = 64
    iv_size: int = 16

    def __post_init__(self) -> None:
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive, got {self.block_size}")
        if self.iv_size < 0:
            raise ValueError(f"iv_size must be non-negative, got {self.iv_size}")

    @property
    def leaf_hash(self) -> LeafHash:
        """Leaf hash for these blocks: hash_block64 for 64-byte blocks, else hash_leaf."""
        return hash_block64 if self.block_size == BLOCK64_SIZE else hash_leaf


def bytes_to_blocks(data: bytes, block_size: int) -> List[bytes]:
    """Split data into block_size chunks, zero-padding the last one on the right."""
    if block_size <= 0:
        raise ValueError(f"block_size must be positive, got {block_size}")
    blocks = []
    for start in range(0, len(data), block_size):
        block = bytes(data[start:start + block_size])
        blocks.append(block + bytes(block_size - len(block)))
    return blocks


def split_ciphertext(ct: bytes, config: BlockConfig = BlockConfig()) -> List[bytes]:
    """Split a ciphertext into [iv, block_0, block_1, ...].

    Data blocks are not padded: the last one may be shorter than block_size.
    """
    if len(ct) < config.iv_size:
        raise ConstructionError(
            f"Ciphertext of {len(ct)} bytes is shorter than its {config.iv_size}-byte IV"
        )
    ct = bytes(ct)
    blocks = [ct[:config.iv_size]]
    for start in range(config.iv_size, len(ct), config.block_size):
        blocks.append(ct[start:start + config.block_size])
    return blocks


def accumulate_ciphertext(ct: bytes, config: BlockConfig = BlockConfig()) -> MerkleRoot:
    """Root committing to the blocks of a ciphertext.

    64-byte blocks do not fit a 32-byte word, so with block_size 64 every
    block (IV included) is hashed whole with hash_block64.
    """
    blocks = split_ciphertext(ct, config)
    if config.block_size == BLOCK64_SIZE:
        return accumulate_fixed64(blocks)
    return accumulate(blocks)
