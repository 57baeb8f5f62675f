"""Tests for multi-proof and extension-proof generation."""

import numpy as np
import pytest

from merkle_accumulator.errors import ConstructionError
from merkle_accumulator.keccak import hash_leaf, hash_node
from merkle_accumulator.merkle_prover import MerkleProver, prove, prove_ext, sibling_index
from merkle_accumulator.merkle_tree import build_tree


class TestSiblingIndex:

    @pytest.mark.parametrize("idx,expected", [(0, 1), (1, 0), (2, 3), (3, 2), (10, 11)])
    def test_sibling(self, idx: int, expected: int) -> None:
        assert sibling_index(idx) == expected


class TestProve:
    """Test proof shape for hand-checked trees."""

    def test_two_values(self) -> None:
        values = [b"\xde\xad", b"\xbe\xef"]
        assert prove(values, [0]) == [[hash_leaf(values[1])]]

    def test_covered_pair_in_first_layer(self, abcd: list[bytes]) -> None:
        """Indices 1 and 2 need leaves 3 and 0, reversed, and nothing above."""
        leaves = [hash_leaf(v) for v in abcd]

        proof = prove(abcd, [1, 2])

        assert len(proof) == 2
        assert proof[0] == [leaves[3], leaves[0]]
        assert proof[1] == []

    def test_sibling_pair_needs_nothing_at_leaves(self, abcd: list[bytes]) -> None:
        """Indices 0 and 1 are a covered pair; only the right subtree is sent."""
        leaves = [hash_leaf(v) for v in abcd]
        assert prove(abcd, [0, 1]) == [[], [hash_node(leaves[2], leaves[3])]]

    def test_all_indices_need_no_hash(self, abcd: list[bytes]) -> None:
        assert prove(abcd, [0, 1, 2, 3]) == [[], []]

    def test_single_value_has_empty_proof(self) -> None:
        assert prove([b"only"], [0]) == []

    def test_odd_trailing_leaf(self) -> None:
        """The unpaired leaf has no sibling in its own layer."""
        values = [b"a", b"b", b"c"]
        layers = build_tree(values)
        assert prove(values, [2]) == [[], [layers[1][0]]]

    def test_indices_are_sorted_and_deduplicated(self) -> None:
        values = [bytes([i]) for i in range(9)]
        assert prove(values, [7, 2, 2, 5]) == prove(values, [2, 5, 7])

    @pytest.mark.parametrize("n", [2, 3, 5, 8, 13])
    def test_one_proof_layer_per_non_root_layer(self, n: int) -> None:
        values = [bytes([i]) for i in range(n)]
        assert len(prove(values, [0])) == len(build_tree(values)) - 1

    def test_single_index_proof_has_one_hash_per_paired_layer(self) -> None:
        values = [bytes([i]) for i in range(8)]
        proof = prove(values, [5])
        assert [len(layer) for layer in proof] == [1, 1, 1]


class TestProveErrors:
    """Generator preconditions fail loudly."""

    def test_no_values(self) -> None:
        with pytest.raises(ConstructionError, match="no value"):
            prove([], [0])

    def test_no_indices(self) -> None:
        with pytest.raises(ConstructionError, match="at least one index"):
            prove([b"a"], [])

    def test_too_many_indices(self) -> None:
        with pytest.raises(ConstructionError, match="greater than number of values"):
            prove([b"a", b"b"], [0, 1, 1])

    @pytest.mark.parametrize("idx", [-1, 2, 100])
    def test_index_out_of_range(self, idx: int) -> None:
        with pytest.raises(ConstructionError, match="not a valid index"):
            prove([b"a", b"b"], [idx])

    def test_non_integer_index(self) -> None:
        with pytest.raises(ConstructionError):
            prove([b"a", b"b"], [0.0])

    def test_construction_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            prove([], [0])


class TestMerkleProver:
    """Test the prover object."""

    def test_commit_matches_tree(self, abcd: list[bytes]) -> None:
        prover = MerkleProver(abcd)
        assert prover.commit() == build_tree(abcd)[-1][0]
        assert prover.tree.n_leaves == 4

    def test_open_bundles_sorted_hashes(self, abcd: list[bytes]) -> None:
        opening = MerkleProver(abcd).open([2, 1, 2])

        assert opening.indices == [1, 2]
        assert opening.value_hashes == [hash_leaf(b"b"), hash_leaf(b"c")]
        assert opening.proof == prove(abcd, [1, 2])

    def test_prove_ext_is_last_index(self) -> None:
        values = [bytes([i]) for i in range(6)]
        assert prove_ext(values) == prove(values, [5])

    def test_prove_does_not_alias_values(self, abcd: list[bytes]) -> None:
        prover = MerkleProver(abcd)
        abcd.append(b"e")
        assert prover.tree.n_leaves == 4


class TestIndexTypes:
    """Any integral index type is accepted; bool is not."""

    def test_numpy_indices(self) -> None:
        values = [bytes([i]) for i in range(9)]
        indices = np.array([7, 2, 5], dtype=np.int64)
        assert prove(values, indices) == prove(values, [2, 5, 7])

    def test_numpy_indices_opening_uses_python_ints(self) -> None:
        values = [bytes([i]) for i in range(9)]
        opening = MerkleProver(values).open(np.array([4, 1], dtype=np.int32))
        assert opening.indices == [1, 4]
        assert all(type(i) is int for i in opening.indices)

    def test_numpy_index_out_of_range(self) -> None:
        with pytest.raises(ConstructionError, match="not a valid index"):
            prove([b"a", b"b"], [np.int64(2)])

    def test_bool_index_rejected(self) -> None:
        with pytest.raises(ConstructionError, match="not a valid index"):
            prove([b"a", b"b"], [True])
