"""Pydantic models for API responses and OpenAPI documentation."""
