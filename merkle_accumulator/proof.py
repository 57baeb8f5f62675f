"""Multi-proof data structures and serialization.

A proof is one list of sibling hashes per non-root tree layer. Each list is
stored in pop order: the sibling needed first is the last element. This is
the layout the on-chain verifier consumes, and every codec here preserves it.
"""

import struct
from dataclasses import dataclass, field
from typing import Any, List, Sequence

from merkle_accumulator.errors import ProofFormatError
from merkle_accumulator.keccak import HASH_SIZE

# --- Type Aliases ---

Hash = bytes  # 32-byte Keccak-256 word
Proof = List[List[Hash]]


# --- Proof Data Structures ---

@dataclass
class Opening:
    """Values revealed at some tree positions together with their multi-proof.

    Attributes:
        indices: Strictly ascending leaf positions
        value_hashes: Leaf hashes aligned position-for-position with indices
        proof: Multi-proof layers, each in pop order
    """
    indices: List[int] = field(default_factory=list)
    value_hashes: List[Hash] = field(default_factory=list)
    proof: Proof = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        return {
            "indices": list(self.indices),
            "valueHashes": [word_to_hex(h) for h in self.value_hashes],
            "proof": proof_to_json(self.proof),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> 'Opening':
        try:
            indices = data["indices"]
            value_hashes = data["valueHashes"]
            proof = data["proof"]
        except (KeyError, TypeError) as e:
            raise ProofFormatError(f"Malformed opening: {e}") from e

        if not isinstance(indices, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) for i in indices
        ):
            raise ProofFormatError("Opening indices must be a list of integers")
        if not isinstance(value_hashes, list):
            raise ProofFormatError("Opening valueHashes must be a list")

        return cls(
            indices=list(indices),
            value_hashes=[word_from_hex(h) for h in value_hashes],
            proof=proof_from_json(proof),
        )


# --- Hex Words ---

def word_to_hex(word: bytes) -> str:
    """Encode a word as 0x-prefixed lowercase hex."""
    return "0x" + bytes(word).hex()


def word_from_hex(text: str) -> Hash:
    """Decode a 0x-prefixed (or bare) hex word of exactly HASH_SIZE bytes."""
    if not isinstance(text, str):
        raise ProofFormatError(f"Expected hex string, got {type(text).__name__}")
    digits = text[2:] if text[:2] in ("0x", "0X") else text
    try:
        word = bytes.fromhex(digits)
    except ValueError as e:
        raise ProofFormatError(f"Invalid hex word {text!r}") from e
    if len(word) != HASH_SIZE:
        raise ProofFormatError(f"Proof word must be {HASH_SIZE} bytes, got {len(word)}")
    return word


# --- JSON ---

def proof_to_json(proof: Sequence[Sequence[bytes]]) -> List[List[str]]:
    """Serialize a proof as nested lists of hex words (bytes32[][] form)."""
    return [[word_to_hex(w) for w in layer] for layer in proof]


def proof_from_json(data: Any) -> Proof:
    """Parse nested lists of hex words back into a proof."""
    if not isinstance(data, list):
        raise ProofFormatError("Proof must be a list of layers")
    proof: Proof = []
    for level, layer in enumerate(data):
        if not isinstance(layer, list):
            raise ProofFormatError(f"Proof layer {level} must be a list")
        proof.append([word_from_hex(w) for w in layer])
    return proof


# --- Binary ---

def proof_to_bytes(proof: Sequence[Sequence[bytes]]) -> bytes:
    """Serialize a proof to its binary form.

    Layout (little-endian):
        u64 n_layers
        for each layer: u64 n_words, then n_words * 32-byte words
    """
    problems = validate_proof_structure(proof)
    if problems:
        raise ProofFormatError("; ".join(problems))

    chunks = [struct.pack('<Q', len(proof))]
    for layer in proof:
        chunks.append(struct.pack('<Q', len(layer)))
        chunks.extend(bytes(w) for w in layer)
    return b"".join(chunks)


def proof_from_bytes(data: bytes) -> Proof:
    """Parse the binary form written by proof_to_bytes."""
    data = bytes(data)
    idx = 0

    def read_count() -> int:
        nonlocal idx
        if idx + 8 > len(data):
            raise ProofFormatError(f"Binary proof truncated at offset {idx}")
        (count,) = struct.unpack('<Q', data[idx:idx + 8])
        idx += 8
        return count

    n_layers = read_count()
    proof: Proof = []
    for _ in range(n_layers):
        n_words = read_count()
        end = idx + n_words * HASH_SIZE
        if end > len(data):
            raise ProofFormatError(f"Binary proof truncated at offset {idx}")
        proof.append([data[i:i + HASH_SIZE] for i in range(idx, end, HASH_SIZE)])
        idx = end

    if idx != len(data):
        raise ProofFormatError(f"Binary proof parsing error: consumed {idx} bytes, expected {len(data)}")
    return proof


# --- Validation ---

def validate_proof_structure(proof: Any) -> List[str]:
    """Return a list of structural problems with proof (empty if well-formed)."""
    if not isinstance(proof, (list, tuple)):
        return [f"Proof must be a sequence of layers, got {type(proof).__name__}"]

    errors = []
    for level, layer in enumerate(proof):
        if not isinstance(layer, (list, tuple)):
            errors.append(f"Layer {level}: expected a sequence, got {type(layer).__name__}")
            continue
        for pos, word in enumerate(layer):
            if not isinstance(word, (bytes, bytearray)):
                errors.append(f"Layer {level}[{pos}]: expected bytes, got {type(word).__name__}")
            elif len(word) != HASH_SIZE:
                errors.append(f"Layer {level}[{pos}]: expected {HASH_SIZE} bytes, got {len(word)}")
    return errors
