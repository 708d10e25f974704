"""
Async Redis Client Factory.

One pooled client per process, shared by the stream publisher and the
realtime feed readers.
"""

import logging

import redis.asyncio as redis
from redis.asyncio import Redis

from community_messaging.config.settings import Config

logger = logging.getLogger(__name__)


async def create_redis_client(url: str = None) -> Redis:
    """
    Create async Redis client with connection pool.

    Raises:
        redis.ConnectionError: If Redis is not reachable

    Note:
        socket_timeout must stay above FEED_BLOCK_MS or blocking XREAD
        calls time out client-side.
    """
    url = url or Config.REDIS_URL
    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=max(5.0, Config.FEED_BLOCK_MS / 1000 + 5.0),
        socket_connect_timeout=5.0,
    )

    await client.ping()
    logger.info(f"[Redis] Connected to {url}")

    return client


async def close_redis_client(client: Redis) -> None:
    if client:
        await client.aclose()
        logger.info("[Redis] Connection closed")
