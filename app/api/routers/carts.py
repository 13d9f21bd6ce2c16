#app/api/routers/carts.py
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import CartError
from app.domain.result import Err
from app.domain.schemas import (
    CartItemOut,
    CartOut,
    ErrorOut,
    ItemIn,
    ItemUpdateIn,
)
from app.services.cart_service import CartService
from app.services.session_service import CartSession, SessionStore
from app.utils.settings import IS_PRODUCTION, SESSION_COOKIE_NAME
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cart", tags=["cart"])

ERROR_RESPONSES = {
    400: {"model": ErrorOut},
    404: {"model": ErrorOut},
}


def get_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db=db)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def set_session_cookie(response: Response, session: CartSession, max_age: int) -> None:
    if not session.is_new:
        return
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session.session_id,
        max_age=max_age,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="lax",
    )


def get_cart_session(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
) -> CartSession:
    session = store.resolve(request.cookies.get(SESSION_COOKIE_NAME))
    # handlery bledow nie widza tego Response - sesja zostaje tez w request.state
    request.state.cart_session = session
    set_session_cookie(response, session, store.ttl_seconds)
    return session


def error_response(error: CartError, session: CartSession, store: SessionStore) -> JSONResponse:
    logger.warning(f"Cart operation error {error.code}: {error.message}")
    response = JSONResponse(status_code=error.status_code, content=error.to_dict())
    set_session_cookie(response, session, store.ttl_seconds)
    return response


def invalid_item_id(session: CartSession, store: SessionStore) -> JSONResponse:
    response = JSONResponse(
        status_code=400,
        content={"error": "INVALID_ITEM_ID", "message": "Valid item ID is required"},
    )
    set_session_cookie(response, session, store.ttl_seconds)
    return response


def current_cart_id(svc: CartService, store: SessionStore, session: CartSession) -> str:
    cart = svc.get_or_create_cart(session.session_id, session.user_id)
    store.bind_cart(session, cart.id)
    return cart.id


@router.post("/items", response_model=CartItemOut, status_code=201, responses=ERROR_RESPONSES)
def add_item(
    payload: ItemIn,
    svc: CartService = Depends(get_service),
    store: SessionStore = Depends(get_session_store),
    session: CartSession = Depends(get_cart_session),
):
    cart_id = current_cart_id(svc, store, session)
    result = svc.add_item(cart_id, payload.product_id, payload.quantity)
    if isinstance(result, Err):
        return error_response(result.error, session, store)

    logger.info(f"Item {result.value.id} added to cart {cart_id}")
    return CartItemOut.model_validate(result.value)


@router.get("", response_model=CartOut)
def get_cart(
    svc: CartService = Depends(get_service),
    store: SessionStore = Depends(get_session_store),
    session: CartSession = Depends(get_cart_session),
):
    cart_id = current_cart_id(svc, store, session)
    return svc.get_cart(cart_id)


@router.put("/items/{item_id}", response_model=CartItemOut, responses=ERROR_RESPONSES)
def update_item(
    item_id: str,
    payload: ItemUpdateIn,
    svc: CartService = Depends(get_service),
    store: SessionStore = Depends(get_session_store),
    session: CartSession = Depends(get_cart_session),
):
    if not item_id.strip():
        return invalid_item_id(session, store)

    result = svc.update_item_quantity(item_id, payload.quantity)
    if isinstance(result, Err):
        return error_response(result.error, session, store)

    return CartItemOut.model_validate(result.value)


@router.delete("/items/{item_id}", status_code=204, responses=ERROR_RESPONSES)
def remove_item(
    item_id: str,
    svc: CartService = Depends(get_service),
    store: SessionStore = Depends(get_session_store),
    session: CartSession = Depends(get_cart_session),
):
    if not item_id.strip():
        return invalid_item_id(session, store)

    result = svc.remove_item(item_id)
    if isinstance(result, Err):
        return error_response(result.error, session, store)
    return None


@router.delete("", status_code=204)
def clear_cart(
    svc: CartService = Depends(get_service),
    store: SessionStore = Depends(get_session_store),
    session: CartSession = Depends(get_cart_session),
):
    cart_id = current_cart_id(svc, store, session)
    svc.clear_cart(cart_id)
    return None
