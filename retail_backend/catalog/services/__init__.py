from .products import CatalogError, create_product, set_product_active, update_product

__all__ = ["CatalogError", "create_product", "update_product", "set_product_active"]
