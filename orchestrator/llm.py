import json
import logging
import time
import uuid
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Sequence, Union

import google.generativeai as genai
from pydantic import BaseModel

from trip_tools.models import ConversationMessage, ToolInvocation, ToolOutcome

from .config import CONFIG


class AssistantTurn(BaseModel):
    """What the model said in one turn, including any tool calls it asked for."""

    text: str = ""
    tool_calls: List[ToolInvocation] = []


HistoryItem = Union[ConversationMessage, AssistantTurn, ToolOutcome]

# A model turn streams text fragments and tool requests in the order produced.
ModelChunk = Union[str, ToolInvocation]


class ChatModel(Protocol):
    def stream_turn(
        self,
        system: str,
        history: Sequence[HistoryItem],
        tools: List[Dict[str, Any]],
    ) -> AsyncIterator[ModelChunk]: ...


# --- Function declaration schemas --------------------------------------------

# Gemini accepts an OpenAPI subset; everything else pydantic emits is dropped.
_SCHEMA_KEYS = {"type", "format", "description", "nullable", "enum", "items", "properties", "required"}


def _resolve_ref(ref: str, defs: Dict[str, Any]) -> Dict[str, Any]:
    return defs.get(ref.rsplit("/", 1)[-1], {})


def _clean_schema(node: Dict[str, Any], defs: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if "$ref" in node:
        merged = dict(_resolve_ref(node["$ref"], defs))
        if node.get("description"):
            merged["description"] = node["description"]
        return _clean_schema(merged, defs)

    if "allOf" in node:
        merged = {k: v for k, v in node.items() if k != "allOf"}
        for part in node["allOf"]:
            merged = {**part, **merged}
        return _clean_schema(merged, defs)

    for combinator in ("anyOf", "oneOf"):
        if combinator in node:
            options = [o for o in node[combinator] if o.get("type") != "null"]
            nullable = len(options) < len(node[combinator])
            if not options:
                return None
            merged = dict(options[0])
            if node.get("description"):
                merged["description"] = node["description"]
            cleaned = _clean_schema(merged, defs)
            if cleaned is not None and nullable:
                cleaned["nullable"] = True
            return cleaned

    if "const" in node and "enum" not in node:
        node = {**node, "enum": [node["const"]]}

    out: Dict[str, Any] = {}
    for key, value in node.items():
        if key not in _SCHEMA_KEYS:
            continue
        if key == "properties":
            props = {}
            for name, sub in value.items():
                cleaned = _clean_schema(sub, defs)
                if cleaned is not None:
                    props[name] = cleaned
            out["properties"] = props
        elif key == "items":
            cleaned = _clean_schema(value, defs)
            out["items"] = cleaned if cleaned is not None else {"type": "string"}
        elif key == "enum":
            if all(isinstance(v, str) for v in value):
                out["enum"] = list(value)
                out["type"] = "string"
            elif "type" not in node:
                out["type"] = "integer" if all(isinstance(v, int) for v in value) else "string"
        else:
            out[key] = value

    if "type" not in out and "enum" not in out:
        return None
    if out.get("type") == "object":
        # Free-form objects have no properties, which Gemini refuses.
        if not out.get("properties"):
            return None
        if "required" in out:
            out["required"] = [r for r in out["required"] if r in out["properties"]]
            if not out["required"]:
                del out["required"]
    return out


def to_function_declaration(declaration: Dict[str, Any]) -> Dict[str, Any]:
    schema = declaration.get("parameters") or {}
    defs = schema.get("$defs", {})
    parameters = _clean_schema(schema, defs)
    out: Dict[str, Any] = {"name": declaration["name"], "description": declaration.get("description", "")}
    if parameters and parameters.get("properties"):
        out["parameters"] = parameters
    return out


# --- History conversion ------------------------------------------------------

def _jsonable(value: Any) -> Any:
    return json.loads(json.dumps(value, default=str))


def to_contents(history: Sequence[HistoryItem]) -> List[Dict[str, Any]]:
    contents: List[Dict[str, Any]] = []
    for item in history:
        if isinstance(item, ConversationMessage):
            if item.role == "system" or not item.content:
                continue
            role = "user" if item.role == "user" else "model"
            contents.append({"role": role, "parts": [{"text": item.content}]})
        elif isinstance(item, AssistantTurn):
            parts: List[Dict[str, Any]] = []
            if item.text:
                parts.append({"text": item.text})
            for call in item.tool_calls:
                parts.append({"function_call": {"name": call.name, "args": call.arguments}})
            if parts:
                contents.append({"role": "model", "parts": parts})
        elif isinstance(item, ToolOutcome):
            part = {"function_response": {"name": item.name, "response": _jsonable(item.result)}}
            # Consecutive outcomes of one batch travel in a single content block.
            if contents and contents[-1]["role"] == "user" and "function_response" in contents[-1]["parts"][0]:
                contents[-1]["parts"].append(part)
            else:
                contents.append({"role": "user", "parts": [part]})
    return contents


# --- Gemini adapter ----------------------------------------------------------

class GeminiChatModel:
    def __init__(self, model_name: str, api_key: Optional[str] = None, temperature: float = 0.7) -> None:
        if api_key:
            genai.configure(api_key=api_key)
        self.model_name = model_name
        self.temperature = temperature

    @classmethod
    def from_config(cls) -> "GeminiChatModel":
        return cls(CONFIG.gemini_model, api_key=CONFIG.gemini_api_key, temperature=CONFIG.temperature)

    def _model(self, system: str, tools: List[Dict[str, Any]]) -> "genai.GenerativeModel":
        kwargs: Dict[str, Any] = {
            "system_instruction": system,
            "generation_config": {"temperature": self.temperature},
        }
        if tools:
            kwargs["tools"] = [{"function_declarations": [to_function_declaration(t) for t in tools]}]
        return genai.GenerativeModel(self.model_name, **kwargs)

    async def stream_turn(
        self,
        system: str,
        history: Sequence[HistoryItem],
        tools: List[Dict[str, Any]],
    ) -> AsyncIterator[ModelChunk]:
        start_time = time.monotonic()
        ok = False
        calls = 0
        try:
            response_stream = await self._model(system, tools).generate_content_async(
                to_contents(history), stream=True
            )
            async for chunk in response_stream:
                for candidate in chunk.candidates or []:
                    content = getattr(candidate, "content", None)
                    for part in getattr(content, "parts", None) or []:
                        fc = getattr(part, "function_call", None)
                        if fc and fc.name:
                            calls += 1
                            args = type(fc).to_dict(fc).get("args") or {}
                            yield ToolInvocation(id=f"call_{uuid.uuid4().hex[:8]}", name=fc.name, arguments=args)
                        elif getattr(part, "text", ""):
                            yield part.text
            ok = True
        finally:
            latency_ms = (time.monotonic() - start_time) * 1000
            logging.info(json.dumps({
                "ts": datetime.utcnow().isoformat(),
                "tool": "gemini",
                "fn": "stream_turn",
                "latency_ms": f"{latency_ms:.2f}",
                "ok": ok,
                "tool_calls": calls,
            }))
