"""
Pytest test suite for the Agrofix storefront backend.

Test categories:
- Unit tests: grouping, stats, cart, validators, models (no database)
- Integration tests: services against a throwaway SQLite file
- API tests: the FastAPI app through httpx, including the async client
"""
