import asyncio
import json
import logging
from typing import Any, AsyncIterator, Dict, Optional, Sequence, Set

from .driver import CancellationToken, ConversationDriver, DriverEvent
from .llm import HistoryItem


DONE_FRAME = "data: [DONE]\n\n"
APOLOGY = "\n\nSorry, something went wrong while I was working on that. Please try again."

# Driver runs outliving their stream; referenced here so they are not collected mid-write.
_BACKGROUND: Set["asyncio.Task[Any]"] = set()


def sse(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


def frame_for(event: DriverEvent) -> str:
    if event.type == "token":
        return sse({"content": event.content})
    if event.type == "tool_call":
        return sse({"toolCall": json.dumps({"name": event.name, "args": event.data}, default=str)})
    return sse({"toolResult": json.dumps({"name": event.name, "output": event.data}, default=str)})


class _Finished:
    def __init__(self, error: Optional[BaseException] = None) -> None:
        self.error = error


class StreamMultiplexer:
    """Turns one driver run into an ordered SSE frame stream ending in ``[DONE]``."""

    def __init__(self, driver: ConversationDriver, token: Optional[CancellationToken] = None) -> None:
        self.driver = driver
        self.token = token or CancellationToken()

    async def frames(self, system: str, messages: Sequence[HistoryItem]) -> AsyncIterator[str]:
        queue: "asyncio.Queue[Any]" = asyncio.Queue()

        async def emit(event: DriverEvent) -> None:
            await queue.put(event)

        async def run() -> None:
            try:
                await self.driver.run(system, messages, emit, self.token)
            except Exception as e:
                logging.exception("agent run failed")
                await queue.put(_Finished(e))
            else:
                await queue.put(_Finished())

        task = asyncio.create_task(run())
        streamed_text = False
        try:
            while True:
                item = await queue.get()
                if isinstance(item, _Finished):
                    if item.error is not None:
                        if streamed_text:
                            yield sse({"content": APOLOGY})
                        else:
                            yield sse({"error": str(item.error) or "Failed to process request"})
                    break
                if item.type == "token":
                    streamed_text = True
                yield frame_for(item)
            yield DONE_FRAME
        finally:
            if not task.done():
                # Consumer went away: stop emitting, let started tool work finish.
                self.token.cancel()
                _BACKGROUND.add(task)
                task.add_done_callback(_BACKGROUND.discard)
