"""Multi-proof and extension-proof verification.

The verifier recomputes a root from revealed leaf hashes and a proof, with
the same pop-from-the-end consumption order as the on-chain verifier. It is
meant to be run on untrusted input: every function here returns False on
malformed data and never raises. The caller's proof is never modified.
"""

import logging
import numbers
from typing import Any, List, Optional, Sequence, Tuple

from merkle_accumulator.keccak import hash_node
from merkle_accumulator.merkle_prover import sibling_index
from merkle_accumulator.merkle_tree import MerkleRoot
from merkle_accumulator.proof import Opening, Proof

logger = logging.getLogger(__name__)


# --- Input Checks ---

def _is_word(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray))


def _is_index(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 0


def _copy_proof(proof: Any) -> Optional[Proof]:
    """Per-layer copies of proof, or None if it is not a sequence of word sequences."""
    if not isinstance(proof, (list, tuple)):
        return None
    layers: Proof = []
    for layer in proof:
        if not isinstance(layer, (list, tuple)) or not all(_is_word(w) for w in layer):
            return None
        layers.append([bytes(w) for w in layer])
    return layers


def _check_openings(indices: Any, value_hashes: Any) -> Optional[str]:
    """Return why (indices, value_hashes) cannot be verified, or None."""
    if not isinstance(indices, (list, tuple)) or not isinstance(value_hashes, (list, tuple)):
        return "indices and value hashes must be sequences"
    if len(indices) != len(value_hashes):
        return f"{len(indices)} indices but {len(value_hashes)} value hashes"
    if len(indices) == 0:
        return "no index to verify"
    if not all(_is_index(i) for i in indices):
        return "indices must be non-negative integers"
    if any(a >= b for a, b in zip(indices, indices[1:])):
        return "indices must be strictly ascending"
    if not all(_is_word(h) for h in value_hashes):
        return "value hashes must be bytes"
    return None


def normalize_openings(
    indices: Sequence[int], value_hashes: Sequence[bytes]
) -> Tuple[List[int], List[bytes]]:
    """Sort openings by index and drop repeated indices.

    Value hashes are permuted along with their indices, so the result
    satisfies the verifier's ordering requirement. For a repeated index the
    first hash given is kept.
    """
    if len(indices) != len(value_hashes):
        raise ValueError(f"{len(indices)} indices but {len(value_hashes)} value hashes")
    seen = {}
    for idx, h in zip(indices, value_hashes):
        seen.setdefault(idx, h)
    ordered = sorted(seen)
    return ordered, [seen[i] for i in ordered]


# --- Verification ---

def verify(
    root: bytes,
    indices: Sequence[int],
    value_hashes: Sequence[bytes],
    proof: Sequence[Sequence[bytes]],
) -> bool:
    """Check that proof opens value_hashes at indices under root.

    Args:
        root: Expected root of the tree built from all values
        indices: Strictly ascending leaf positions (see normalize_openings)
        value_hashes: Leaf hashes aligned position-for-position with indices
        proof: Multi-proof as produced by prove(values, indices)

    Returns:
        True if the recomputed root equals root
    """
    reason = _check_openings(indices, value_hashes)
    if reason is not None:
        logger.debug("Rejecting multi-proof: %s", reason)
        return False

    layers = _copy_proof(proof)
    if layers is None:
        logger.debug("Rejecting multi-proof: malformed proof structure")
        return False

    current_indices = [int(i) for i in indices]
    current_values = [bytes(h) for h in value_hashes]

    for proof_layer in layers:
        pairs = [tuple(sorted((i, sibling_index(i)))) for i in current_indices]

        next_indices: List[int] = []
        next_values: List[bytes] = []
        i = 0
        while i < len(pairs):
            if i + 1 < len(pairs) and pairs[i] == pairs[i + 1]:
                # Covered pair: both children were revealed
                next_values.append(hash_node(current_values[i], current_values[i + 1]))
                next_indices.append(current_indices[i] >> 1)
                i += 2
                continue

            if proof_layer:
                sibling = proof_layer.pop()
                if sibling_index(current_indices[i]) < current_indices[i]:
                    next_values.append(hash_node(sibling, current_values[i]))
                else:
                    next_values.append(hash_node(current_values[i], sibling))
            else:
                # Unpaired trailing node, carried up unchanged
                next_values.append(current_values[i])
            next_indices.append(current_indices[i] >> 1)
            i += 1

        current_indices = next_indices
        current_values = next_values

    if len(current_values) != 1:
        logger.debug("Rejecting multi-proof: %d values left after last layer", len(current_values))
        return False
    if not _is_word(root) or current_values[0] != bytes(root):
        logger.debug("Rejecting multi-proof: root mismatch")
        return False
    return True


def verify_previous(prev_root: bytes, proof: Sequence[Sequence[bytes]]) -> bool:
    """Check that folding all proof words into one hash chain gives prev_root.

    Layers are visited in order and each is drained from its end. The first
    word popped seeds the chain; every following word x turns the chain value
    acc into hash_node(x, acc). This ignores the tree shape on purpose: it is
    the fold the on-chain verifier performs.
    """
    layers = _copy_proof(proof)
    if layers is None:
        logger.debug("Rejecting previous root: malformed proof structure")
        return False

    computed: Optional[bytes] = None
    for layer in layers:
        while layer:
            word = layer.pop()
            computed = word if computed is None else hash_node(word, computed)

    if computed is None:
        logger.debug("Rejecting previous root: proof holds no hash")
        return False
    if not _is_word(prev_root) or computed != bytes(prev_root):
        logger.debug("Rejecting previous root: root mismatch")
        return False
    return True


def verify_ext(
    i: int,
    prev_root: bytes,
    curr_root: bytes,
    added_value_hash: bytes,
    proof: Sequence[Sequence[bytes]],
) -> bool:
    """Check that the value hashed to added_value_hash was appended at position i.

    Args:
        i: Position of the added value (size of the new sequence - 1)
        prev_root: Root before the addition
        curr_root: Root after the addition
        added_value_hash: Leaf hash of the added value
        proof: Extension proof from prove_ext(new_values)
    """
    return verify(curr_root, [i], [added_value_hash], proof) and verify_previous(prev_root, proof)


# --- Verifier Class ---

class MerkleVerifier:
    """Verifier bound to one committed root.

    Usage:
        verifier = MerkleVerifier(root)
        if not verifier.verify_opening(opening):
            ...
    """

    def __init__(self, root: MerkleRoot) -> None:
        self.root = root

    def verify(
        self,
        indices: Sequence[int],
        value_hashes: Sequence[bytes],
        proof: Sequence[Sequence[bytes]],
    ) -> bool:
        return verify(self.root, indices, value_hashes, proof)

    def verify_opening(self, opening: Opening) -> bool:
        """Verify an Opening produced by MerkleProver.open()."""
        return verify(self.root, opening.indices, opening.value_hashes, opening.proof)

    def verify_extension_of(
        self, prev_root: MerkleRoot, i: int, added_value_hash: bytes, proof: Proof
    ) -> bool:
        """Check that this root extends prev_root by one value at position i."""
        return verify_ext(i, prev_root, self.root, added_value_hash, proof)
