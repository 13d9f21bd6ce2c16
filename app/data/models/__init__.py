#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.product import ProductModel
from app.data.models.inventory import InventoryModel
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel

__all__ = ["ProductModel", "InventoryModel", "CartModel", "CartItemModel"]
