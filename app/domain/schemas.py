# app/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, StrictInt, StringConstraints
from pydantic.alias_generators import to_camel

# kwoty trzymamy jako Decimal, do JSON-a wychodza jako liczby
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ItemIn(CamelModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)] = Field(
        ..., description="ID produktu"
    )
    # dodatniosc sprawdza serwis (INVALID_QUANTITY), tu tylko typ
    quantity: StrictInt = Field(..., description="Ilosc produktu")


class ItemUpdateIn(CamelModel):
    """Schema dla zmiany ilosci produktu w koszyku."""

    quantity: StrictInt = Field(..., description="Nowa ilosc produktu")


class CartItemOut(CamelModel):
    """Pojedyncza pozycja koszyka (odpowiedz na add/update)."""

    id: str
    cart_id: str
    product_id: str
    quantity: int
    price_snapshot: Money
    created_at: datetime
    updated_at: datetime


class CartLineOut(CamelModel):
    """Pozycja koszyka z danymi produktu."""

    id: str
    product_id: str
    product_name: str
    product_image: str
    quantity: int
    price_snapshot: Money
    subtotal: Money


class CartOut(CamelModel):
    """Koszyk z pozycjami i podsumowaniem."""

    id: str
    items: List[CartLineOut]
    subtotal: Money
    tax: Money
    total: Money
    item_count: int


class ErrorOut(BaseModel):
    error: str
    message: str
