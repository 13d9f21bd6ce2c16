# app/repos/cart_repo.py
from sqlalchemy import select, delete, update
from sqlalchemy.orm import Session, selectinload

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.inventory import InventoryModel
from app.data.models.product import ProductModel


def inventory_query(product_id: str, lock: bool = False):
    stmt = select(InventoryModel).where(InventoryModel.product_id == product_id)
    if lock:
        # SELECT ... FOR UPDATE, na sqlite ignorowane
        stmt = stmt.with_for_update()
    return stmt


class CartRepo:
    """
    Dostep do tabel koszyka. Repo nie commituje samo (poza create/attach) -
    granice transakcji ustawia serwis.
    """

    def __init__(self, db: Session):
        self.db = db

    # koszyk
    def get_cart_by_session(self, session_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.session_id == session_id)
        ).scalar_one_or_none()

    def get_cart_with_items(self, cart_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.id == cart_id)
            .options(selectinload(CartModel.items).selectinload(CartItemModel.product))
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def attach_user(self, cart_id: str, user_id: str) -> int:
        # warunek user_id IS NULL - raz ustawiony user nie jest nadpisywany
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.user_id.is_(None))
            .values(user_id=user_id)
        )
        self.db.commit()
        return result.rowcount

    # produkt i magazyn (tylko odczyt)
    def get_product(self, product_id: str) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_inventory(self, product_id: str, lock: bool = False) -> InventoryModel | None:
        return self.db.execute(inventory_query(product_id, lock)).scalar_one_or_none()

    # pozycje
    def get_cart_item(self, cart_id: str, product_id: str) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_item(self, item_id: str) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, item_id: str) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.id == item_id))
        return result.rowcount

    def delete_cart_items(self, cart_id: str) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        return result.rowcount

    # transakcje
    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, obj):
        self.db.refresh(obj)
