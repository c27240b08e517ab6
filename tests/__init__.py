"""
Test Suite for Ledger Sync

Test Structure:
- fixtures/: Fake ledgers and canned site pages
- unit/: Unit tests mirroring src/ package structure
- integration/: Configuration and CLI tests

All test data is synthetic.
"""
