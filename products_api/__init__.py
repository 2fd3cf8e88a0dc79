"""Products API - a small REST service over a single Product resource.

Layers:
- **api**: FastAPI application, routes, request validation and middleware
- **core**: Configuration, logging, errors and request context
- **infrastructure**: Async SQLAlchemy store client, models and repositories

Requests flow through the origin gate and the logging middleware, are
validated field by field, and only then reach the product handlers, which
talk to the relational store through an explicitly owned store client.
"""
