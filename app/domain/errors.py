# app/domain/errors.py
"""
Bledy domeny koszyka.

Kazdy blad ma stabilny kod (dla klienta API), status HTTP i czytelny komunikat.
Wszystkie sa lokalne i odwracalne - nie koncza procesu.
"""


class CartError(Exception):
    code = "CART_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class InvalidQuantityError(CartError):
    code = "INVALID_QUANTITY"
    status_code = 400

    def __init__(self, quantity):
        super().__init__(f"Invalid quantity: {quantity}. Must be a positive integer")
        self.quantity = quantity


class ProductNotFoundError(CartError):
    code = "PRODUCT_NOT_FOUND"
    status_code = 404

    def __init__(self, product_id: str):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class InsufficientInventoryError(CartError):
    code = "INSUFFICIENT_INVENTORY"
    status_code = 400

    def __init__(self, product_id: str, available: int, requested: int):
        super().__init__(
            f"Insufficient inventory for product {product_id}. "
            f"Available: {available}, Requested: {requested}"
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class CartItemNotFoundError(CartError):
    code = "CART_ITEM_NOT_FOUND"
    status_code = 404

    def __init__(self, item_id: str):
        super().__init__(f"Cart item not found: {item_id}")
        self.item_id = item_id
