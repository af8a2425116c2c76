"""
Integration Tests Package

End-to-end scenarios through the RelationalStore facade.

TEST AXIOMS:
=============
1. Determinism: same content = same hashes = same paths
2. Immutability: no operation alters a store that already exists
3. Explicit failure: every miss is a typed error with context
"""
