import json
import os
from typing import Any, Dict, Optional
from urllib.parse import quote

import redis
from loguru import logger


class RecordStore:
    """Redis-backed store for imported records, keyed by (customer, type, id)."""

    def __init__(self, redis_url: Optional[str] = None, in_memory: bool = False):
        """Initialize Redis connection, or in-memory storage when asked or unreachable."""
        self.r = None
        self._memory: Dict[str, str] = {}

        if in_memory:
            logger.info("Record store running in memory")
            return

        try:
            redis_url = redis_url or os.getenv("REDIS_URL", "redis://localhost:6379")
            self.r = redis.from_url(redis_url, decode_responses=True)
            # Test connection
            self.r.ping()
            logger.info("Redis connection established successfully")
        except redis.RedisError as e:
            logger.error(f"Redis connection failed: {e}")
            # Fallback to in-memory storage (not recommended for production)
            self.r = None

    @staticmethod
    def key_for(record_id: str, customer_id: str, record_type: str) -> str:
        # Parts are percent-encoded; ":" only ever separates them
        parts = (quote(str(part), safe="") for part in (customer_id, record_type, record_id))
        return "record:" + ":".join(parts)

    def insert_if_absent(self, record: Dict[str, Any]) -> bool:
        """
        Store a normalized record unless one with the same key already exists.

        Args:
            record: Normalized record with id, customerId and recordType

        Returns:
            True if the record was inserted, False if it was already stored
        """
        key = self.key_for(record["id"], record["customerId"], record["recordType"])
        value = json.dumps(record, default=str)

        if self.r:
            return self.r.set(name=key, value=value, nx=True) is True

        return self._memory.setdefault(key, value) is value

    def find(self, record_id: str, customer_id: str, record_type: str) -> Optional[Dict[str, Any]]:
        """Point lookup of a stored record."""
        key = self.key_for(record_id, customer_id, record_type)
        raw = self.r.get(key) if self.r else self._memory.get(key)
        return json.loads(raw) if raw else None

    def is_connected(self) -> bool:
        return self.r is not None
