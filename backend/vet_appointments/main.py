import logging

from fastapi import FastAPI
from redis.exceptions import RedisError

from .config import settings
from .exception_handlers import register_exception_handlers
from .redis_client import redis_client
from .routers import appointments

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Veterinary Appointments API")

register_exception_handlers(app)
app.include_router(appointments.router)


@app.get("/health")
def health():
    try:
        redis_ok = bool(redis_client.ping())
    except RedisError as e:
        logger.warning(f"Redis ping failed: {e}")
        redis_ok = False
    return {"status": "ok", "redis": redis_ok}
