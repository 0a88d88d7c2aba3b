from .category import CategorySerializer
from .product import ProductActiveSerializer, ProductSerializer, ProductWriteSerializer

__all__ = [
    "CategorySerializer",
    "ProductSerializer",
    "ProductWriteSerializer",
    "ProductActiveSerializer",
]
