"""Cross-cutting building blocks shared by every layer.

- **config**: Environment-driven settings
- **context**: Request correlation id storage
- **exceptions**: Error hierarchy mapped to HTTP responses by the API layer
- **logging**: Loguru setup and formatters
- **types**: Aliases for untyped JSON data
"""
