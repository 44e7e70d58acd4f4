"""
Handpicked Test Suite

Test Categories:
- unit/: Fast, isolated tests of the playout math, highlight ranking and config
- integration/: API tests against an in-memory database
- fixtures/: Shared test data factories
"""
