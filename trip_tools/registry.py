from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Type
import json
import logging
import time
from datetime import date, datetime

import pydantic
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .booking import BookingClient
from .currency.resolver import CurrencyContext
from .errors import NotAuthenticated, ToolError
from .geocoding import GeocodingPipeline
from .models import ToolInvocation, ToolOutcome
from .store import TripStore


class ToolArgs(BaseModel):
    """Arguments as the model sends them: camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


@dataclass
class ToolContext:
    user_id: Optional[str]
    currency: CurrencyContext
    store: TripStore
    pipeline: GeocodingPipeline
    booking: BookingClient
    today: date = field(default_factory=date.today)

    def require_user(self) -> str:
        if not self.user_id:
            raise NotAuthenticated("User not authenticated")
        return self.user_id


Handler = Callable[[Any, ToolContext], Awaitable[Dict[str, Any]]]


@dataclass
class Tool:
    name: str
    description: str
    args_model: Type[ToolArgs]
    handler: Handler
    # Tools that write to the trip store; these must not be cut short mid-write.
    mutates: bool = False


def _validation_message(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid arguments: " + "; ".join(parts)


class ToolRegistry:
    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: Dict[str, Tool] = {}
        for t in tools:
            self.register(t)

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def declarations(self) -> List[Dict[str, Any]]:
        return [
            {
                "name": t.name,
                "description": t.description,
                "parameters": t.args_model.model_json_schema(by_alias=True),
            }
            for t in self._tools.values()
        ]

    async def invoke(self, invocation: ToolInvocation, ctx: ToolContext) -> ToolOutcome:
        """Run one tool call. Every failure comes back as ``success: false``."""
        start_time = time.monotonic()
        envelope: Dict[str, Any]
        tool = self._tools.get(invocation.name)
        try:
            if tool is None:
                raise ToolError(f"Unknown tool: {invocation.name}")
            args = tool.args_model.model_validate(invocation.arguments or {})
            data = await tool.handler(args, ctx)
            envelope = {"success": True, "data": data}
        except pydantic.ValidationError as e:
            envelope = {"success": False, "error": _validation_message(e), "errorType": "validation_error"}
        except ToolError as e:
            envelope = {"success": False, "error": e.message, "errorType": e.code}
        except Exception as e:
            logging.exception("tool %s crashed", invocation.name)
            envelope = {"success": False, "error": str(e) or type(e).__name__, "errorType": "internal_error"}

        envelope["context"] = {
            "currentDate": ctx.today.isoformat(),
            "currency": str(ctx.currency.currency),
        }
        latency_ms = (time.monotonic() - start_time) * 1000
        log_data = {
            "ts": datetime.utcnow().isoformat(),
            "tool": invocation.name,
            "fn": "invoke",
            "latency_ms": f"{latency_ms:.2f}",
            "ok": envelope["success"],
        }
        if not envelope["success"]:
            log_data["error"] = envelope["error"]
        logging.info(json.dumps(log_data))
        return ToolOutcome(id=invocation.id, name=invocation.name, result=envelope)
