"""API-related constants."""

CORRELATION_ID_HEADER = "X-Correlation-ID"

API_PREFIX = "/api/products"
PRODUCTS_TAG = "Products"

PRODUCT_DELETED_MESSAGE = "Producto Eliminado."
