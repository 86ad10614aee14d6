"""Small Redis command layer: per-executor connections with a selected db and key."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol

import redis

_log = logging.getLogger(__name__)


class RedisConnection(Protocol):
    """The part of a Redis connection the executor needs."""

    def send_command(self, *args: Any) -> None: ...

    def read_response(self) -> Any: ...

    def disconnect(self) -> None: ...


ConnectionFactory = Callable[[], RedisConnection]


def _call(connection: RedisConnection, *args: Any) -> Any:
    connection.send_command(*args)
    return connection.read_response()


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _split_addr(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep or not host:
        raise ValueError(f"invalid redis address: {addr!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, int(port)


class RedisUtils:
    """Creates authenticated connections to one Redis server."""

    def __init__(
        self,
        addr: str,
        password: str = "",
        *,
        connection_factory: ConnectionFactory | None = None,
    ) -> None:
        self.addr = addr
        self.password = password
        if connection_factory is None:
            host, port = _split_addr(addr)

            def connection_factory() -> RedisConnection:
                return redis.Connection(host=host, port=port)

        self._connection_factory = connection_factory

    def _connect(self) -> RedisConnection:
        connection = self._connection_factory()
        if self.password:
            _call(connection, "auth", self.password)
        return connection

    def create_executor(self) -> "RedisExecutor":
        """Open a connection, authenticate if needed and wrap it in an executor."""
        return RedisExecutor(self._connect())


class RedisExecutor:
    """Runs commands on one connection against a chosen db and key.

    ``db`` and ``key`` return the executor itself so calls can be chained.
    Failed commands raise :class:`redis.exceptions.RedisError`.
    """

    def __init__(self, connection: RedisConnection, db: int = 0, key: str = "") -> None:
        self._connection = connection
        self._db = db
        self._key = key

    def __enter__(self) -> "RedisExecutor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying connection."""
        self._connection.disconnect()

    def db(self, index: int) -> "RedisExecutor":
        """Select the database used by following commands."""
        self._db = index
        return self

    def key(self, key: str) -> "RedisExecutor":
        """Select the key used by following commands."""
        self._key = key
        return self

    def do(self, command: str, *args: Any) -> Any:
        """Select the current db, then run a raw command and return its reply."""
        _call(self._connection, "select", self._db)
        return _call(self._connection, command, *args)

    def keys(self) -> list[str]:
        """Return every key in the current db."""
        return [_text(key) for key in self.do("keys", "*") or ()]

    def set(self, value: Any) -> None:
        self.do("set", self._key, value)

    def get(self) -> Any:
        return self.do("get", self._key)

    def exist(self) -> bool:
        return bool(self.do("exists", self._key))

    def delete(self) -> None:
        self.do("del", self._key)

    def hset(self, field: str, value: Any) -> None:
        self.do("hset", self._key, field, value)

    def hget(self, field: str) -> bytes | None:
        return self.do("hget", self._key, field)

    def hgetall(self) -> dict[str, bytes]:
        entries = self.do("hgetall", self._key) or []
        pairs = iter(entries)
        return {_text(name): value for name, value in zip(pairs, pairs)}

    def hexist(self, field: str) -> bool:
        return bool(self.do("hexists", self._key, field))

    def hdel(self, field: str) -> None:
        self.do("hdel", self._key, field)

    def hscan(self, page: int, size: int) -> list[tuple[str, str]]:
        """Scan one page of the hash; the cursor is derived from the page number."""
        reply = self.do("hscan", self._key, (page - 1) * size, "count", size)
        pairs = iter(reply[1])
        return [(_text(name), _text(value)) for name, value in zip(pairs, pairs)]

    def zadd(self, score: Any, member: Any) -> None:
        self.do("zadd", self._key, score, member)

    def zadd_if_absent(self, score: Any, member: Any) -> None:
        self.do("zadd", self._key, "nx", score, member)

    def _zpage(self, command: str, page: int, size: int) -> list[str]:
        start = (page - 1) * size
        reply = self.do(command, self._key, start, start + size - 1)
        return [_text(member) for member in reply or ()]

    def zrange_desc(self, page: int, size: int) -> list[str]:
        """Return one page of members, highest score first."""
        return self._zpage("zrevrange", page, size)

    def zrange_asc(self, page: int, size: int) -> list[str]:
        """Return one page of members, lowest score first."""
        return self._zpage("zrange", page, size)

    def zrange(self) -> list[tuple[str, str]]:
        """Return every (member, score) pair of the sorted set."""
        pairs = iter(self.do("zrange", self._key, 0, -1, "withscores") or ())
        return [(_text(member), _text(score)) for member, score in zip(pairs, pairs)]

    def zget_score(self, member: Any) -> Any:
        """Return the ascending rank of the member, or None if absent."""
        return self.do("zrank", self._key, member)

    def zdel(self, member: Any) -> None:
        self.do("zrem", self._key, member)

    def zdel_with_score(self, score: Any) -> None:
        self.do("zremrangebyscore", self._key, score, score)

    def count_zset(self) -> int:
        return int(self.do("zcard", self._key))

    def set_expires(self, seconds: int) -> None:
        self.do("expire", self._key, seconds)


def start_expired_keys_subscription(
    utils: RedisUtils, db: int, callback: Callable[[int, str], None]
) -> threading.Thread:
    """Call ``callback(db, key)`` in a new thread whenever a key in ``db`` expires.

    Keyspace notifications are enabled on the server first. Returns the
    daemon thread that listens; it ends when the connection is lost.
    """
    connection = utils._connect()
    _call(connection, "config", "set", "protected-mode", "no")
    _call(connection, "config", "set", "notify-keyspace-events", "AE")

    pattern = f"__keyevent@{db}__:expired"
    connection.send_command("psubscribe", pattern)

    def listen() -> None:
        while True:
            try:
                message = connection.read_response()
            except (redis.ConnectionError, redis.TimeoutError, OSError):
                _log.info("expired keys subscription closed")
                return
            except redis.RedisError as exc:
                _log.error("expired keys subscription error: %s", exc)
                continue
            if not isinstance(message, list) or len(message) != 4:
                continue
            kind, message_pattern, _channel, data = message
            if _text(kind) == "pmessage" and _text(message_pattern) == pattern:
                threading.Thread(
                    target=callback, args=(db, _text(data)), daemon=True
                ).start()

    thread = threading.Thread(target=listen, name="redis-expired-keys", daemon=True)
    thread.start()
    return thread