"""Exceptions raised by the accumulator.

Verification never raises: only proof construction and proof decoding do.
"""


class ConstructionError(ValueError):
    """Invalid input to tree construction or proof generation."""


class ProofFormatError(ValueError):
    """Serialized proof does not match the wire format."""
