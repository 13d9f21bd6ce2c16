import uuid

from sqlalchemy import Column, String, Text, Numeric, DateTime
from sqlalchemy.orm import relationship

from app.data.database import Base
from app.data.models.cart import _now


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String(1024), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    inventory = relationship("InventoryModel", back_populates="product", uselist=False)
