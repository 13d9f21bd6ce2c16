"""Tests for the redis-backed session store (redis client mocked)."""
import json
from unittest.mock import Mock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.services.session_service import CartSession, SessionNotFoundError, SessionStore


@pytest.fixture
def redis_client():
    client = Mock()
    client.get.return_value = None
    return client


@pytest.fixture
def store(redis_client):
    return SessionStore(redis_client, ttl_seconds=600)


class TestResolve:
    def test_missing_cookie_starts_new_session(self, store, redis_client):
        session = store.resolve(None)

        assert session.is_new
        assert session.user_id is None
        key, value = redis_client.set.call_args.args
        assert key == f"session:{session.session_id}"
        assert json.loads(value)["cartId"] is None
        assert redis_client.set.call_args.kwargs["ex"] == 600
        redis_client.get.assert_not_called()

    def test_unknown_id_starts_new_session(self, store, redis_client):
        session = store.resolve("expired-id")

        redis_client.get.assert_called_once_with("session:expired-id")
        assert session.is_new
        assert session.session_id != "expired-id"

    def test_known_session_is_loaded_and_refreshed(self, store, redis_client):
        redis_client.get.return_value = json.dumps({"userId": "user-1", "cartId": "cart-1"})

        session = store.resolve("abc")

        assert not session.is_new
        assert session.session_id == "abc"
        assert session.user_id == "user-1"
        assert session.cart_id == "cart-1"
        key, value = redis_client.set.call_args.args
        assert key == "session:abc"
        assert "lastActivity" in json.loads(value)

    def test_corrupted_payload_is_discarded(self, store, redis_client):
        redis_client.get.return_value = "{not json"

        session = store.resolve("abc")

        assert session.is_new

    def test_transient_redis_error_is_retried(self, store, redis_client):
        redis_client.get.side_effect = [RedisConnectionError("reset"), json.dumps({"userId": None})]

        session = store.resolve("abc")

        assert session.session_id == "abc"
        assert redis_client.get.call_count == 2


class TestBinding:
    def test_bind_cart_saves_once(self, store, redis_client):
        session = CartSession(session_id="abc", data={"userId": None, "cartId": None})

        store.bind_cart(session, "cart-1")
        store.bind_cart(session, "cart-1")

        assert redis_client.set.call_count == 1
        assert json.loads(redis_client.set.call_args.args[1])["cartId"] == "cart-1"
        assert session.cart_id == "cart-1"

    def test_attach_user(self, store, redis_client):
        redis_client.get.return_value = json.dumps({"userId": None, "cartId": "cart-1"})

        session = store.attach_user("abc", "user-9")

        assert session.user_id == "user-9"
        saved = json.loads(redis_client.set.call_args.args[1])
        assert saved["userId"] == "user-9"
        assert saved["cartId"] == "cart-1"

    def test_attach_user_to_unknown_session_fails(self, store, redis_client):
        with pytest.raises(SessionNotFoundError):
            store.attach_user("expired-id", "user-9")

        redis_client.get.assert_called_once_with("session:expired-id")
        redis_client.set.assert_not_called()


class TestLifecycle:
    def test_ping_reports_failure(self, store, redis_client):
        redis_client.ping.side_effect = RedisConnectionError("down")

        assert store.ping() is False

    def test_close(self, store, redis_client):
        store.close()

        redis_client.close.assert_called_once()
