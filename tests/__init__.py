"""
OpenShelf Test Suite

Test Categories:
- unit/: Fast, isolated unit tests
- fixtures/: Shared test data, fakes and canned API payloads
"""
