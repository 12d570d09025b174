import os
from aiocache import Cache

# Get Redis configuration from environment
REDIS_HOST = os.environ.get('REDIS_HOST')
REDIS_PORT = int(os.environ.get('REDIS_PORT', '6379'))
REDIS_PASSWORD = os.environ.get('REDIS_PASSWORD', '')

if REDIS_HOST:
    _cache = Cache(
        Cache.REDIS,
        endpoint=REDIS_HOST,
        port=REDIS_PORT,
        password=REDIS_PASSWORD if REDIS_PASSWORD else None,
        pool_max_size=10,
        db=0
    )
else:
    # Single process without Redis
    _cache = Cache(Cache.MEMORY)

async def get_cache() -> Cache:
    return _cache
