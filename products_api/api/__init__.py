"""HTTP API layer of the Products REST API.

Key components:
- **main**: Application factory and lifecycle management
- **routers**: Product resource handlers
- **validation**: Field validators and the validation aggregator
- **middleware**: Origin gate, correlation ids, request logging and
  centralized error handling
- **schemas**: Pydantic models for response serialization and API docs
- **utils**: orjson response class
"""
