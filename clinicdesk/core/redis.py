import redis.asyncio as redis
from clinicdesk.core.config import settings

RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""

class RedisClient:
    def __init__(self):
        self.redis = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)

    async def set_token(self, token: str, value: str, expire: int):
        await self.redis.set(f"token:{token}", value, ex=expire)

    async def get_token(self, token: str) -> str | None:
        return await self.redis.get(f"token:{token}")

    async def delete_token(self, token: str):
        await self.redis.delete(f"token:{token}")

    async def acquire_slot_lock(self, key: str, owner: str, expire: int) -> bool:
        """Take the booking lock for one slot. Returns False if someone else holds it."""
        acquired = await self.redis.set(f"slot:{key}", owner, nx=True, ex=expire)
        return bool(acquired)

    async def release_slot_lock(self, key: str, owner: str):
        # Atomic compare-and-delete: only the owner releases
        await self.redis.eval(RELEASE_SCRIPT, 1, f"slot:{key}", owner)

    async def close(self):
        await self.redis.close()

redis_client = RedisClient()
