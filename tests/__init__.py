"""Tests - merkle accumulator test suite."""
