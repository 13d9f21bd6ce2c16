# app/data/seed.py
from decimal import Decimal

from sqlalchemy.orm import Session

from app.data.database import Database
from app.data.models.inventory import InventoryModel
from app.data.models.product import ProductModel
from app.utils.settings import DATABASE_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)

# (nazwa, cena, obrazek, stan, zarezerwowane)
PRODUCTS = [
    ("Hydrating Facial Serum", "45.99", "/images/products/hydrating-serum.jpg", 150, 0),
    ("Anti-Aging Night Cream", "68.50", "/images/products/night-cream.jpg", 120, 5),
    ("Gentle Cleansing Foam", "28.00", "/images/products/cleansing-foam.jpg", 200, 10),
    ("Long-Lasting Foundation", "42.00", "/images/products/foundation.jpg", 180, 15),
    ("Volumizing Mascara", "24.99", "/images/products/mascara.jpg", 250, 20),
    ("Matte Lipstick Collection", "55.00", "/images/products/lipstick-set.jpg", 100, 8),
]


def seed(db: Session) -> int:
    # nie nadpisujemy: seed tylko na pustej bazie
    if db.query(ProductModel).first():
        return 0

    for name, price, image_url, quantity, reserved in PRODUCTS:
        product = ProductModel(name=name, price=Decimal(price), image_url=image_url)
        product.inventory = InventoryModel(quantity=quantity, reserved=reserved)
        db.add(product)
    db.commit()

    logger.info(f"Seeded {len(PRODUCTS)} products")
    return len(PRODUCTS)


if __name__ == "__main__":
    database = Database(DATABASE_URL)
    database.connect()
    database.create_all()
    db = database.session()
    try:
        seed(db)
    finally:
        db.close()
        database.close()
