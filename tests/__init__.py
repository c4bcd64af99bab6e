"""
Tests Package - Unit and Integration Tests

Test structure:
- tests/test_*.py - pytest modules, one per component
- tests/conftest.py - shared fixtures (fake fetchers, recording sleep)

HTTP is faked with httpx.MockTransport; async code runs through asyncio.run.
"""
