from redis.asyncio import Redis

_redis_clients: dict[str, Redis] = {}


def get_redis(url: str) -> Redis:
    """Shared client per URL; backs the cache and rate-limit stores."""
    client = _redis_clients.get(url)
    if client is None:
        client = Redis.from_url(url, decode_responses=True)
        _redis_clients[url] = client
    return client


async def close_redis() -> None:
    for client in _redis_clients.values():
        await client.aclose()
    _redis_clients.clear()
