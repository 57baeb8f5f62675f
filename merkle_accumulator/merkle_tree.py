"""Binary Merkle tree over Keccak-256 leaf hashes.

Layer 0 holds the leaf hashes in value order. Each following layer pairs
nodes (2k, 2k+1); an unpaired trailing node is carried up unchanged, without
hashing. The last layer holds a single node, the root.
"""

from typing import Callable, List, Sequence

from merkle_accumulator.errors import ConstructionError
from merkle_accumulator.keccak import hash_block64, hash_leaf, hash_node

# --- Type Aliases ---

MerkleRoot = bytes
Layer = List[bytes]
LeafHash = Callable[[bytes], bytes]


# --- Layer Construction ---

def compute_next_layer(layer: Sequence[bytes]) -> Layer:
    """Hash adjacent pairs of a layer; an odd trailing node is copied as-is."""
    next_layer: Layer = []
    for i in range(0, len(layer), 2):
        if i + 1 < len(layer):
            next_layer.append(hash_node(layer[i], layer[i + 1]))
        else:
            next_layer.append(layer[i])
    return next_layer


def build_tree(values: Sequence[bytes], leaf_hash: LeafHash = hash_leaf) -> List[Layer]:
    """Return all layers of the tree built from values, leaves first.

    An empty sequence yields a single empty layer. A single value yields a
    single layer holding its leaf hash, which is then the root.
    """
    if len(values) == 0:
        return [[]]

    layer = [leaf_hash(v) for v in values]
    layers = [layer]
    while len(layer) > 1:
        layer = compute_next_layer(layer)
        layers.append(layer)
    return layers


def accumulate(values: Sequence[bytes]) -> MerkleRoot:
    """Return the root committing to values."""
    return MerkleTree.build(values).get_root()


def accumulate_fixed64(values: Sequence[bytes]) -> MerkleRoot:
    """Return the root committing to values read as 64-byte blocks.

    Leaves are hash_block64 of each value, so all 64 bytes of a block are
    committed. Inner nodes are the same keccak256(left || right).
    """
    return MerkleTree.build(values, leaf_hash=hash_block64).get_root()


# --- Merkle Tree ---

class MerkleTree:
    """Layered binary Merkle tree.

    Usage:
        tree = MerkleTree.build(values)
        root = tree.get_root()
        siblings = tree.get_layer(0)
    """

    def __init__(self, layers: List[Layer]):
        self.layers = layers

    @classmethod
    def build(cls, values: Sequence[bytes], leaf_hash: LeafHash = hash_leaf) -> 'MerkleTree':
        """Build the tree committing to values."""
        return cls(build_tree(values, leaf_hash))

    # --- Accessors ---

    @property
    def n_leaves(self) -> int:
        return len(self.layers[0])

    @property
    def height(self) -> int:
        """Number of layers, root layer included."""
        return len(self.layers)

    def is_empty(self) -> bool:
        return self.n_leaves == 0

    def get_root(self) -> MerkleRoot:
        """Return the root commitment.

        Raises:
            ConstructionError: If the tree was built from no values
        """
        if self.is_empty():
            raise ConstructionError("Empty tree has no root")
        return self.layers[-1][0]

    def get_layer(self, level: int) -> Layer:
        """Return a copy of the layer at level (0 = leaves)."""
        if level < 0 or level >= self.height:
            raise IndexError(f"Layer {level} out of range [0, {self.height})")
        return list(self.layers[level])

    def non_root_layers(self) -> List[Layer]:
        """Layers a proof is made of: every layer except the root layer."""
        return self.layers[:-1]
