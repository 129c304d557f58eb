import os
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
import uvicorn
from trip_tools.routers.geo import router as geo_router
from trip_tools.routers.currency import router as currency_router
from trip_tools.routers.calendar import router as calendar_router
from trip_tools.routers.booking import router as booking_router
from .config import CONFIG
from .deps import get_api_key
from .runtime import RUNTIME


# --- Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler()  # Ensure logs go to stdout/stderr
    ]
)
# --------------------------

limiter = Limiter(key_func=get_remote_address, default_limits=[CONFIG.rate_limit])

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.http_client = await RUNTIME.startup()
    try:
        yield
    finally:
        await RUNTIME.shutdown()

app = FastAPI(title="Trip Tools", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=512)
app.include_router(geo_router, prefix="/geo")
app.include_router(currency_router, prefix="/currency")
app.include_router(calendar_router, prefix="/calendar")
app.include_router(booking_router, prefix="/booking")


@app.get("/", dependencies=[Depends(get_api_key)])
async def root(_: Request):
    return {"status": "ok"}


if __name__ == "__main__":
    port = int(os.getenv("PORT", "3001"))
    uvicorn.run(app, host="0.0.0.0", port=port)
