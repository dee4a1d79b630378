"""
Tests for the shop_service package.

Each module drives the FastAPI application through TestClient, or the
service layer directly, against a throwaway SQLite database configured in
conftest.py.
"""
