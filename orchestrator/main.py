import os
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ConfigDict
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
import uvicorn

from trip_tools.booking import BookingClient
from trip_tools.currency.resolver import CurrencyContext, resolve_request
from trip_tools.geocoding import GeocodingPipeline, provider_from_config
from trip_tools.models import ConversationMessage
from trip_tools.registry import ToolContext
from trip_tools.runtime import RUNTIME
from trip_tools.store import InMemoryTripStore
from trip_tools.toolset import default_registry

from .config import CONFIG
from .driver import ConversationDriver
from .llm import GeminiChatModel
from .prompt import build_system_prompt
from .stream import StreamMultiplexer


# --- Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler()
    ]
)
# --------------------------

limiter = Limiter(key_func=get_remote_address, default_limits=[CONFIG.rate_limit])


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.http_client = await RUNTIME.startup()
    if getattr(app.state, "store", None) is None:
        app.state.store = InMemoryTripStore()
    if getattr(app.state, "registry", None) is None:
        app.state.registry = default_registry()
    if getattr(app.state, "chat_model", None) is None:
        app.state.chat_model = GeminiChatModel.from_config()
    try:
        yield
    finally:
        await RUNTIME.shutdown()


app = FastAPI(title="Trip Planner Agent", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=512)


class AgentRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    messages: List[ConversationMessage] = []
    userName: Optional[str] = None
    currencyContext: Optional[Dict[str, Any]] = None
    # Older clients send the selected currency as a code or as {code, symbol, name}.
    currency: Optional[Union[str, Dict[str, Any]]] = None

    def legacy_currency(self) -> Optional[str]:
        if isinstance(self.currency, dict):
            code = self.currency.get("code")
            return code if isinstance(code, str) else None
        return self.currency


def _tool_context(request: Request, currency: CurrencyContext) -> ToolContext:
    client = request.app.state.http_client
    return ToolContext(
        user_id=request.headers.get(CONFIG.user_id_header) or None,
        currency=currency,
        store=request.app.state.store,
        pipeline=GeocodingPipeline(provider_from_config(client)),
        booking=BookingClient.from_config(client),
    )


@app.post("/agent")
async def agent(req: AgentRequest, request: Request):
    if not req.messages:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Messages array is required")

    currency = resolve_request(request.headers, req.currencyContext, req.legacy_currency())
    ctx = _tool_context(request, currency)
    system = build_system_prompt(currency, user_name=req.userName, today=ctx.today)
    driver = ConversationDriver(request.app.state.chat_model, request.app.state.registry, ctx)
    mux = StreamMultiplexer(driver)
    return StreamingResponse(
        mux.frames(system, req.messages),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@app.get("/currency", response_model=CurrencyContext, response_model_by_alias=True)
async def currency(request: Request, override: Optional[str] = Query(default=None)) -> CurrencyContext:
    return resolve_request(request.headers, None, override)


@app.get("/")
async def root(_: Request):
    return {"status": "ok"}


if __name__ == "__main__":
    port = int(os.getenv("PORT", "3002"))
    uvicorn.run(app, host="0.0.0.0", port=port)
