"""
Key-value persistence for cart, price history, product history and member session.
Supports Redis (if REDIS_URL set), a JSON file (if STORAGE_PATH set) and an
in-memory fallback.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import StorageError
from .settings import settings

logger = logging.getLogger(__name__)

CART_KEY = "keranjang_kita_cart"
PRICE_HISTORY_KEY = "keranjang_kita_prices"
PRODUCT_HISTORY_KEY = "keranjang_kita_products"
MEMBER_SESSION_KEY = "keranjang_kita_member"


class InMemoryStore:
    """In-memory storage, lost on restart."""

    def __init__(self):
        self.store: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.store.get(key)

    def set(self, key: str, value: str) -> None:
        self.store[key] = value

    def delete(self, key: str) -> None:
        self.store.pop(key, None)


class JsonFileStore:
    """All keys kept in one JSON object on disk."""

    def __init__(self, path: str):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if text == "":
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            # corrupted file -> start over rather than crash
            logger.warning(f"Storage file {self.path} is corrupt, treating as empty")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, str]) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)


class RedisStore:
    """Redis-backed storage."""

    def __init__(self, redis_client, prefix: str = "keranjang:"):
        self.redis = redis_client
        self.prefix = prefix

    def get(self, key: str) -> Optional[str]:
        try:
            return self.redis.get(f"{self.prefix}{key}")
        except Exception as e:
            raise StorageError(f"Redis get {key} failed: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self.redis.set(f"{self.prefix}{key}", value)
        except Exception as e:
            raise StorageError(f"Redis set {key} failed: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.redis.delete(f"{self.prefix}{key}")
        except Exception as e:
            raise StorageError(f"Redis delete {key} failed: {e}") from e


KeyValueStore = InMemoryStore | JsonFileStore | RedisStore


# === Global Store Instance ===
_store: Optional[KeyValueStore] = None


def get_store() -> KeyValueStore:
    """Get or initialize the global store instance."""
    global _store

    if _store is not None:
        return _store

    # Try Redis first
    if settings.REDIS_URL:
        try:
            import redis
            client = redis.from_url(settings.REDIS_URL, decode_responses=True)
            client.ping()  # Test connection
            _store = RedisStore(client)
            logger.info(f"Using Redis store: {settings.REDIS_URL}")
            return _store
        except Exception as e:
            logger.warning(f"Redis connection failed, falling back: {e}")

    if settings.STORAGE_PATH:
        _store = JsonFileStore(settings.STORAGE_PATH)
        logger.info(f"Using JSON file store: {settings.STORAGE_PATH}")
        return _store

    # Fallback to in-memory
    _store = InMemoryStore()
    logger.info("Using in-memory store")
    return _store


def load_json(store: KeyValueStore, key: str, default: Any) -> Any:
    """
    Read and decode a JSON value. Missing, unreadable or corrupt values
    return `default`; never raises.
    """
    try:
        raw = store.get(key)
    except StorageError as e:
        logger.error(f"Error loading {key}: {e}")
        return default
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"Corrupt value under {key}, using default")
        return default


def save_json(store: KeyValueStore, key: str, value: Any) -> bool:
    """Encode and write a JSON value. Returns False on failure; never raises."""
    try:
        store.set(key, json.dumps(value, ensure_ascii=False))
        return True
    except (StorageError, TypeError, ValueError) as e:
        logger.error(f"Error saving {key}: {e}")
        return False


def delete_key(store: KeyValueStore, key: str) -> None:
    try:
        store.delete(key)
    except StorageError as e:
        logger.error(f"Error deleting {key}: {e}")
