import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from redis import Redis
from redis.exceptions import RedisError

from .config import settings
from .redis_client import get_redis
from .routers import (
    auth,
    bookings,
    company,
    company_services,
    service_categories,
    services,
    users,
)
from .services.errors import ServiceError

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Servicebook API")

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(company.router)
app.include_router(service_categories.router)
app.include_router(services.router)
app.include_router(company_services.router)
app.include_router(bookings.router)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    logger.warning(
        f"{request.method} {request.url.path} rejected: "
        f"{exc.status_code} {exc.detail}"
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/health")
def health(redis: Redis = Depends(get_redis)):
    try:
        redis_ok = bool(redis.ping())
    except RedisError:
        redis_ok = False
    return {"status": "ok", "redis": redis_ok}
