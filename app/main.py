# app/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn

from app.api import include_routers
from app.api.routers.carts import set_session_cookie
from app.data.database import Database
from app.services.session_service import SessionStore
from app.utils.settings import DATABASE_URL, SQL_ECHO
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid request body. " + "; ".join(parts)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        response = JSONResponse(
            status_code=400,
            content={"error": "INVALID_INPUT", "message": _validation_message(exc)},
        )
        # nowa sesja mogla juz powstac w zaleznosciach, klient musi dostac cookie
        session = getattr(request.state, "cart_session", None)
        if session is not None:
            set_session_cookie(response, session, request.app.state.session_store.ttl_seconds)
        return response

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unexpected error in {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "INTERNAL_SERVER_ERROR", "message": "An unexpected error occurred"},
        )


def create_app(
    database: Database | None = None,
    session_store: SessionStore | None = None,
) -> FastAPI:
    """
    Klienci (baza, redis) tworzeni jawnie i wstrzykiwani przez app.state.
    Polaczenie otwierane i zamykane w lifespan.
    """
    database = database or Database(DATABASE_URL, echo=SQL_ECHO, pool_pre_ping=True)
    session_store = session_store or SessionStore.from_url()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Initializing database...")
        database.connect()
        database.create_all()
        session_store.connect()
        try:
            yield
        finally:
            session_store.close()
            database.close()

    app = FastAPI(
        title="Cosmetics Cart Service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.db = database
    app.state.session_store = session_store

    register_error_handlers(app)
    include_routers(app)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
