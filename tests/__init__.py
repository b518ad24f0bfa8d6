"""
Test suite for hypernum

Contains:
- tests/unit/          : Unit tests for the substrate, normalizers and inversions
"""
