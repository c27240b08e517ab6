"""
Test Fixtures and Utilities

Shared test data and fakes:
- ledgers: in-memory source/destination ledgers and canned site pages

All test data is synthetic and does not contain real financial information.
"""
