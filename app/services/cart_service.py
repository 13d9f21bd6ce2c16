# app/services/cart_service.py
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import (
    CartError,
    CartItemNotFoundError,
    InsufficientInventoryError,
    InvalidQuantityError,
    ProductNotFoundError,
)
from app.domain.result import Err, Ok, Result
from app.domain.schemas import CartLineOut, CartOut
from app.domain.totals import calculate_totals, line_subtotal
from app.repos.cart_repo import CartRepo
from app.utils.settings import INVENTORY_ROW_LOCK, TAX_RATE
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _is_positive_int(value) -> bool:
    # bool to podklasa int, ale True nie jest iloscia
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class CartService:
    """
    Use case'y koszyka.

    Komendy (add, update, remove) zwracaja Ok(wartosc) albo Err(CartError).
    Wewnatrz transakcji bledy domeny sa rzucane, zeby przerwac i wycofac zmiany,
    na granicy serwisu zamieniamy je na Err. Inne wyjatki (baza niedostepna itp.)
    leca dalej bez zmian.

    Zapytania (get_or_create_cart, get_cart, clear_cart) sa totalne.
    """

    def __init__(
        self,
        db: Session,
        tax_rate: Decimal = TAX_RATE,
        lock_inventory: bool = INVENTORY_ROW_LOCK,
    ):
        self.repo = CartRepo(db)
        self.tax_rate = tax_rate
        self.lock_inventory = lock_inventory

    #query
    def get_cart(self, cart_id: str) -> CartOut:
        cart = self.repo.get_cart_with_items(cart_id)

        if not cart:
            # odczyt jest totalny - brak koszyka to pusty koszyk
            return CartOut(
                id=cart_id,
                items=[],
                subtotal=Decimal("0"),
                tax=Decimal("0"),
                total=Decimal("0"),
                item_count=0,
            )

        totals = calculate_totals(
            ((i.price_snapshot, i.quantity) for i in cart.items),
            self.tax_rate,
        )

        response = CartOut(
            id=cart.id,
            items=[
                CartLineOut(
                    id=i.id,
                    product_id=i.product_id,
                    product_name=i.product.name,
                    product_image=i.product.image_url or "",
                    quantity=i.quantity,
                    price_snapshot=i.price_snapshot,
                    subtotal=line_subtotal(i.price_snapshot, i.quantity),
                )
                for i in cart.items
            ],
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            item_count=totals.item_count,
        )

        logger.info(f"Cart {cart_id}: {totals.item_count} items, total {totals.total}")
        return response

    #commands
    def get_or_create_cart(self, session_id: str, user_id: str | None = None) -> CartModel:
        cart = self.repo.get_cart_by_session(session_id)

        if cart:
            #user zalogowal sie majac koszyk goscia - dopinamy usera, bez mergowania
            if user_id and not cart.user_id:
                self.repo.attach_user(cart.id, user_id)
                self.repo.refresh(cart)
                logger.info(f"Attached user {user_id} to cart {cart.id}")
            return cart

        try:
            created = self.repo.create_cart(CartModel(session_id=session_id, user_id=user_id))
        except IntegrityError:
            # rownolegly request z ta sama sesja zdazyl utworzyc koszyk
            self.repo.rollback()
            logger.info(f"Cart for session {session_id} created concurrently, reloading")
            return self.get_or_create_cart(session_id, user_id)

        logger.info(f"Created cart {created.id} for session {session_id} (user: {user_id or 'guest'})")
        return created

    def add_item(self, cart_id: str, product_id: str, quantity: int) -> Result[CartItemModel]:
        """
        Dodaje produkt do koszyka.

        Jesli produkt juz jest w koszyku, ilosc jest sumowana, a cena z pierwszego
        dodania zostaje. Calkowita ilosc nie moze przekroczyc dostepnego stanu
        (quantity - reserved).
        """
        if not _is_positive_int(quantity):
            return Err(InvalidQuantityError(quantity))

        logger.info(f"Adding product {product_id} x{quantity} to cart {cart_id}")
        return self._run(
            lambda: self._add_item(cart_id, product_id, quantity),
            f"add product {product_id} to cart {cart_id}",
        )

    def update_item_quantity(self, item_id: str, quantity: int) -> Result[CartItemModel]:
        """Ustawia ilosc pozycji (nadpisuje, nie dodaje)."""
        if not _is_positive_int(quantity):
            return Err(InvalidQuantityError(quantity))

        logger.info(f"Updating cart item {item_id} to quantity {quantity}")
        return self._run(
            lambda: self._update_item_quantity(item_id, quantity),
            f"update cart item {item_id}",
        )

    def remove_item(self, item_id: str) -> Result[None]:
        logger.info(f"Removing cart item {item_id}")
        return self._run(lambda: self._remove_item(item_id), f"remove cart item {item_id}")

    def clear_cart(self, cart_id: str) -> int:
        try:
            deleted = self.repo.delete_cart_items(cart_id)
            self.repo.commit()
        except Exception as e:
            self.repo.rollback()
            logger.error(f"Error clearing cart {cart_id}: {e}")
            raise

        logger.info(f"Cleared cart {cart_id}, removed {deleted} items")
        return deleted

    # wnetrze transakcji
    def _run(self, operation, description: str) -> Result:
        try:
            value = operation()
            self.repo.commit()
        except CartError as e:
            self.repo.rollback()
            logger.warning(f"Could not {description}: {e.message}")
            return Err(e)
        except Exception as e:
            self.repo.rollback()
            logger.error(f"Error during {description}: {e}")
            raise

        if value is not None:
            self.repo.refresh(value)
        return Ok(value)

    def _available(self, product_id: str) -> int:
        inventory = self.repo.get_inventory(product_id, lock=self.lock_inventory)
        if inventory is None:
            return 0
        return inventory.available

    def _add_item(self, cart_id: str, product_id: str, quantity: int) -> CartItemModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFoundError(product_id)

        available = self._available(product_id)
        existing = self.repo.get_cart_item(cart_id, product_id)

        if existing:
            new_quantity = existing.quantity + quantity
            if available < new_quantity:
                raise InsufficientInventoryError(product_id, available, new_quantity)

            logger.info(
                f"Product {product_id} already in cart {cart_id}, "
                f"quantity {existing.quantity} -> {new_quantity}"
            )
            # price_snapshot zostaje z pierwszego dodania
            existing.quantity = new_quantity
            return self.repo.add_cart_item(existing)

        if available < quantity:
            raise InsufficientInventoryError(product_id, available, quantity)

        item = self.repo.add_cart_item(
            CartItemModel(
                cart_id=cart_id,
                product_id=product_id,
                quantity=quantity,
                price_snapshot=product.price,
            )
        )
        logger.info(f"Created cart item {item.id} with price snapshot {product.price}")
        return item

    def _update_item_quantity(self, item_id: str, quantity: int) -> CartItemModel:
        item = self.repo.get_item(item_id)
        if not item:
            raise CartItemNotFoundError(item_id)

        # porownanie z calym dostepnym stanem, nie z roznica wzgledem starej ilosci
        available = self._available(item.product_id)
        if available < quantity:
            raise InsufficientInventoryError(item.product_id, available, quantity)

        old_quantity = item.quantity
        item.quantity = quantity
        self.repo.add_cart_item(item)

        logger.info(f"Cart item {item_id} quantity {old_quantity} -> {quantity}")
        return item

    def _remove_item(self, item_id: str) -> None:
        #0 rows affected = nie ma takiej pozycji
        if self.repo.delete_item(item_id) == 0:
            raise CartItemNotFoundError(item_id)
        return None
