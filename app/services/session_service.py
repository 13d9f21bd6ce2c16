# app/services/session_service.py
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

import redis
from redis.exceptions import RedisError

from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL, SESSION_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class SessionNotFoundError(LookupError):
    pass


@dataclass
class CartSession:
    session_id: str
    user_id: str | None = None
    cart_id: str | None = None
    is_new: bool = False
    data: dict = field(default_factory=dict)


class SessionStore:
    """
    Sesje w redisie:
    - klucz session:<id>, wartosc JSON {userId, cartId, lastActivity}
    - TTL odnawiany przy kazdym requescie
    - brak lub nieznane id -> nowa sesja

    Klient redisa przychodzi z zewnatrz (lifespan aplikacji), brak globalnego polaczenia.
    """

    prefix = "session:"

    def __init__(self, client: redis.Redis, ttl_seconds: int = SESSION_TTL_SECONDS):
        self.redis = client
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str | None = None, ttl_seconds: int = SESSION_TTL_SECONDS) -> "SessionStore":
        client = redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        return cls(client, ttl_seconds=ttl_seconds)

    def _key(self, session_id: str) -> str:
        return f"{self.prefix}{session_id}"

    # lifecycle
    @redis_retry()
    def connect(self) -> None:
        self.redis.ping()
        logger.info("Session store connected")

    def close(self) -> None:
        self.redis.close()
        logger.info("Session store closed")

    def ping(self) -> bool:
        try:
            return bool(self.redis.ping())
        except RedisError as e:
            logger.error(f"Session store health check failed: {e}")
            return False

    # odczyt / zapis
    @redis_retry()
    def load(self, session_id: str) -> dict | None:
        raw = self.redis.get(self._key(session_id))
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Corrupted session {session_id}, discarding")
            return None

    @redis_retry()
    def save(self, session_id: str, data: dict) -> None:
        data = dict(data, lastActivity=datetime.now(timezone.utc).isoformat())
        #SET session:<id> <json> EX ttl
        self.redis.set(self._key(session_id), json.dumps(data), ex=self.ttl_seconds)

    def resolve(self, session_id: str | None) -> CartSession:
        data = self.load(session_id) if session_id else None

        if data is None:
            session_id = uuid.uuid4().hex
            data = {"userId": None, "cartId": None}
            self.save(session_id, data)
            logger.info(f"Started new session {session_id}")
            return CartSession(session_id=session_id, is_new=True, data=data)

        # odswiez lastActivity i TTL
        self.save(session_id, data)
        return CartSession(
            session_id=session_id,
            user_id=data.get("userId"),
            cart_id=data.get("cartId"),
            data=data,
        )

    def bind_cart(self, session: CartSession, cart_id: str) -> None:
        if session.cart_id == cart_id:
            return
        session.cart_id = cart_id
        session.data["cartId"] = cart_id
        self.save(session.session_id, session.data)

    def attach_user(self, session_id: str, user_id: str) -> CartSession:
        """
        Wywolywane przez logowanie - nastepna operacja na koszyku dopina usera.
        Nieznana lub wygasla sesja -> SessionNotFoundError, nowa nie jest tworzona.
        """
        data = self.load(session_id)
        if data is None:
            raise SessionNotFoundError(f"Unknown or expired session: {session_id}")

        data["userId"] = user_id
        self.save(session_id, data)
        logger.info(f"Session {session_id} bound to user {user_id}")
        return CartSession(
            session_id=session_id,
            user_id=user_id,
            cart_id=data.get("cartId"),
            data=data,
        )
