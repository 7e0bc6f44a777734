"""Integration tests for pyebeco library.

These tests use real API credentials from .env file and make actual API calls.
They are marked with @pytest.mark.integration and skipped by default.

To run integration tests:
    pytest tests/integration -v -m integration

Environment variables required in .env:
    EBECO_USERNAME: Account email
    EBECO_PASSWORD: Account password
    EBECO_API_HOST: API base URL (optional, defaults to production)
"""
