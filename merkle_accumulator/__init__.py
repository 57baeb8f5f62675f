"""Merkle accumulator - commitments, multi-proofs and extension proofs over Keccak-256."""

from merkle_accumulator.blocks import (
    BlockConfig,
    accumulate_ciphertext,
    bytes_to_blocks,
    split_ciphertext,
)
from merkle_accumulator.errors import ConstructionError, ProofFormatError
from merkle_accumulator.keccak import (
    BLOCK64_SIZE,
    HASH_SIZE,
    hash_block64,
    hash_leaf,
    hash_node,
    keccak256,
    to_block64,
    to_bytes32,
)
from merkle_accumulator.merkle_prover import MerkleProver, prove, prove_ext
from merkle_accumulator.merkle_tree import (
    Layer,
    LeafHash,
    MerkleRoot,
    MerkleTree,
    accumulate,
    accumulate_fixed64,
    build_tree,
)
from merkle_accumulator.merkle_verifier import (
    MerkleVerifier,
    normalize_openings,
    verify,
    verify_ext,
    verify_previous,
)
from merkle_accumulator.proof import (
    Opening,
    Proof,
    proof_from_bytes,
    proof_from_json,
    proof_to_bytes,
    proof_to_json,
    validate_proof_structure,
)

__all__ = [
    # Hashing
    "HASH_SIZE",
    "keccak256",
    "to_bytes32",
    "hash_leaf",
    "hash_node",
    "BLOCK64_SIZE",
    "to_block64",
    "hash_block64",
    # Merkle Tree
    "MerkleTree",
    "MerkleRoot",
    "Layer",
    "LeafHash",
    "build_tree",
    "accumulate",
    "accumulate_fixed64",
    # Proving
    "MerkleProver",
    "prove",
    "prove_ext",
    # Verification
    "MerkleVerifier",
    "verify",
    "verify_ext",
    "verify_previous",
    "normalize_openings",
    # Proof format
    "Proof",
    "Opening",
    "proof_to_json",
    "proof_from_json",
    "proof_to_bytes",
    "proof_from_bytes",
    "validate_proof_structure",
    # Ciphertext blocks
    "BlockConfig",
    "bytes_to_blocks",
    "split_ciphertext",
    "accumulate_ciphertext",
    # Errors
    "ConstructionError",
    "ProofFormatError",
]
