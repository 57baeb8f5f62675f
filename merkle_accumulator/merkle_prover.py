"""Multi-proof generation.

A multi-proof opens several leaves at once and shares the work between
them: when two targets are siblings (a covered pair) no hash is sent for
either, and every sibling hash that is needed is sent once. Adapted from
https://arxiv.org/pdf/2002.07648 with the proof split into one list per
layer and each list reversed so the verifier can pop from the end.
"""

import logging
import numbers
from typing import Iterable, List, Sequence

from merkle_accumulator.errors import ConstructionError
from merkle_accumulator.keccak import hash_leaf
from merkle_accumulator.merkle_tree import Layer, LeafHash, MerkleRoot, MerkleTree
from merkle_accumulator.proof import Opening, Proof

logger = logging.getLogger(__name__)


def sibling_index(idx: int) -> int:
    """Index of the node paired with idx in its layer."""
    return idx + 1 if idx % 2 == 0 else idx - 1


def _prove_layer(layer: Layer, targets: List[int]) -> tuple[List[bytes], List[int]]:
    """Collect the sibling hashes one layer needs and the parent targets.

    Args:
        layer: Node hashes of the current layer
        targets: Sorted, unique indices being opened in this layer

    Returns:
        (siblings in pop order, sorted parent indices in the next layer)
    """
    target_set = set(targets)
    needed: List[int] = []
    parents: List[int] = []

    i = 0
    while i < len(targets):
        idx = targets[i]
        neighbor = sibling_index(idx)

        if i + 1 < len(targets) and targets[i + 1] == neighbor:
            # Covered pair: both children are targets, nothing to send
            i += 1
        elif neighbor < len(layer) and neighbor not in target_set:
            needed.append(neighbor)

        parents.append(idx >> 1)
        i += 1

    return [layer[n] for n in reversed(needed)], parents


class MerkleProver:
    """Value holder side of the accumulator.

    Usage:
        prover = MerkleProver(values)
        root = prover.commit()
        proof = prover.prove([1, 5, 6])
        opening = prover.open([1, 5, 6])
    """

    def __init__(self, values: Sequence[bytes], leaf_hash: LeafHash = hash_leaf) -> None:
        if len(values) == 0:
            raise ConstructionError("There is no value")
        self.values = list(values)
        self.leaf_hash = leaf_hash
        self._tree = MerkleTree.build(self.values, leaf_hash)
        logger.debug("Built tree over %d values (%d layers)", len(self.values), self._tree.height)

    # --- Operations ---

    def commit(self) -> MerkleRoot:
        """Return the root committing to all values."""
        return self._tree.get_root()

    def prove(self, indices: Iterable[int]) -> Proof:
        """Generate a multi-proof for the values at indices.

        Indices are deduplicated and sorted before use, so the proof always
        matches the sorted unique index list.

        Raises:
            ConstructionError: If indices is empty, longer than the value
                list, or holds an index out of range
        """
        indices = list(indices)
        targets = self._check_indices(indices)
        proof: Proof = []
        for layer in self._tree.non_root_layers():
            siblings, targets = _prove_layer(layer, targets)
            proof.append(siblings)

        logger.debug(
            "Proof for %d indices: %d layers, %d hashes",
            len(indices), len(proof), sum(len(layer) for layer in proof),
        )
        return proof

    def prove_ext(self) -> Proof:
        """Generate an extension proof for the last value."""
        return self.prove([len(self.values) - 1])

    def open(self, indices: Iterable[int]) -> Opening:
        """Bundle sorted indices, their leaf hashes and the multi-proof."""
        indices = list(indices)
        proof = self.prove(indices)
        targets = self._check_indices(indices)
        return Opening(
            indices=targets,
            value_hashes=[self.leaf_hash(self.values[i]) for i in targets],
            proof=proof,
        )

    @property
    def tree(self) -> MerkleTree:
        return self._tree

    # --- Private Helpers ---

    def _check_indices(self, indices: List[int]) -> List[int]:
        """Validate indices and return them as sorted, unique ints."""
        n_values = len(self.values)
        if len(indices) == 0:
            raise ConstructionError("Specify at least one index")
        if len(indices) > n_values:
            raise ConstructionError(
                f"Number of indices ({len(indices)}) is greater than number of values ({n_values})"
            )
        for idx in indices:
            if not isinstance(idx, numbers.Integral) or isinstance(idx, bool):
                raise ConstructionError(f"{idx!r} is not a valid index")
            if idx < 0 or idx >= n_values:
                raise ConstructionError(f"{idx} is not a valid index")
        return sorted({int(idx) for idx in indices})


# --- Functional Interface ---

def prove(values: Sequence[bytes], indices: Iterable[int]) -> Proof:
    """Multi-proof for values at indices within the tree built from values."""
    return MerkleProver(values).prove(indices)


def prove_ext(values: Sequence[bytes]) -> Proof:
    """Proof that the last of values was appended to the values before it."""
    return MerkleProver(values).prove_ext()
