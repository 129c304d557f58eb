from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
from pathlib import Path
import json
import os

import typer
from rich.console import Console
import httpx


app = typer.Typer()
console = Console()
trace_console = Console(stderr=True)

DONE = ("done", None)


def parse_frame(raw_line: Any) -> Optional[Tuple[str, Any]]:
    """Decode one SSE line from /agent into ``(kind, value)``.

    ``kind`` is one of ``content``, ``tool_call``, ``tool_result``, ``error`` or
    ``done``. Blank lines, comments and non-JSON payloads give ``None``.
    """
    line = raw_line.decode("utf-8") if isinstance(raw_line, (bytes, bytearray)) else raw_line
    line = line.strip()
    if not line.startswith("data:"):
        return None
    data = line[len("data:"):].strip()
    if data == "[DONE]":
        return DONE
    try:
        payload = json.loads(data)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None

    if "content" in payload:
        return ("content", payload["content"])
    if "error" in payload:
        return ("error", payload["error"])
    for key, kind in (("toolCall", "tool_call"), ("toolResult", "tool_result")):
        if key in payload:
            value = payload[key]
            if isinstance(value, str):
                try:
                    value = json.loads(value)
                except json.JSONDecodeError:
                    pass
            return (kind, value)
    return None


def _trace_tool(kind: str, value: Any) -> None:
    if not isinstance(value, dict):
        trace_console.print(f"[{kind}] {value}", style="dim")
        return
    name = value.get("name", "?")
    if kind == "tool_call":
        trace_console.print(f"[tool] {name}({json.dumps(value.get('args', {}))})", style="dim")
        return
    output = value.get("output") or {}
    if output.get("success"):
        trace_console.print(f"[tool] {name} -> ok", style="dim")
    else:
        trace_console.print(f"[tool] {name} -> {output.get('error', 'failed')}", style="dim yellow")


@app.command()
def cli(
    prompt_str: Optional[str] = typer.Option(
        None, "--prompt", help="The first message to send to the travel agent."
    ),
    user_name: Optional[str] = typer.Option(None, "--name", help="Your name, so the agent can greet you."),
    user_id: Optional[str] = typer.Option(
        None, "--user-id", envvar="TRIP_USER_ID", help="User id sent as x-user-id (needed for saving trips)."
    ),
    currency: Optional[str] = typer.Option(None, "--currency", "-c", help="Preferred currency code, e.g. EUR."),
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Append the agent's replies to a Markdown file."
    ),
) -> None:
    orchestrator_url = os.getenv("ORCHESTRATOR_URL", "http://localhost:3002")
    url = f"{orchestrator_url.rstrip('/')}/agent"
    headers = {"Accept": "text/event-stream", "Content-Type": "application/json"}
    if user_id:
        headers["x-user-id"] = user_id
    history: List[Dict[str, str]] = []

    def run_once(message: str) -> str:
        history.append({"role": "user", "content": message})
        body: Dict[str, Any] = {"messages": history, "userName": user_name}
        if currency:
            body["currencyContext"] = {"currency": currency.upper(), "source": "user_override"}
        reply = ""
        try:
            with httpx.stream("POST", url, json=body, headers=headers, timeout=120) as resp:
                resp.raise_for_status()
                for raw_line in resp.iter_lines():
                    frame = parse_frame(raw_line)
                    if frame is None:
                        continue
                    kind, value = frame
                    if kind == "done":
                        break
                    if kind == "content":
                        console.print(value, end="")
                        reply += value
                    elif kind == "error":
                        trace_console.print(value, style="bold red")
                    else:
                        _trace_tool(kind, value)
        except httpx.HTTPError as e:
            trace_console.print(f"Request failed: {e}", style="bold red")
        console.print()
        if reply:
            history.append({"role": "assistant", "content": reply})
        return reply

    def save(md: str) -> None:
        if not (output_file and md):
            return
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with output_file.open("a", encoding="utf-8") as f:
                if f.tell() > 0:
                    f.write("\n\n---\n\n")
                f.write(md)
        except OSError as e:
            trace_console.print(f"Failed to write file: {e}", style="bold red")

    if prompt_str:
        save(run_once(prompt_str))

    while True:
        try:
            user_in = typer.prompt("You (type 'exit' to quit)")
        except (EOFError, KeyboardInterrupt):
            break
        if not user_in.strip():
            continue
        if user_in.strip().lower() in {"exit", "quit", "q"}:
            break
        save(run_once(user_in.strip()))


if __name__ == "__main__":
    app()
