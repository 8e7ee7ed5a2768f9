"""
Tests Package

Test suite for the appointment recommendation service.

Modules:
- test_algorithms: Tests for popularity tables, features, scoring and ranking
- test_agents: Tests for the recommendation agent with mocked backends
- test_api: Tests for FastAPI endpoints
- test_client: Tests for the data service client over a mock transport
- test_core: Tests for config, logging, errors and access checks

Run all tests:
    pytest appointment_ai/tests/

Run specific test file:
    pytest appointment_ai/tests/test_algorithms.py -v
"""
