import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Sequence

from trip_tools.models import ToolInvocation, ToolOutcome
from trip_tools.registry import ToolContext, ToolRegistry

from .config import CONFIG
from .llm import AssistantTurn, ChatModel, HistoryItem


class DriverState(str, Enum):
    AGENT_TURN = "agent_turn"
    TOOL_EXECUTION = "tool_execution"
    TERMINATED = "terminated"


def next_state(state: DriverState, turn: Optional[AssistantTurn] = None) -> DriverState:
    """Transition after a phase finishes. ``turn`` is the model turn that just ended."""
    if state is DriverState.AGENT_TURN:
        if turn is not None and turn.tool_calls:
            return DriverState.TOOL_EXECUTION
        return DriverState.TERMINATED
    if state is DriverState.TOOL_EXECUTION:
        return DriverState.AGENT_TURN
    return DriverState.TERMINATED


class MaxIterationsExceeded(RuntimeError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"Stopped after {limit} model turns without a final answer")
        self.limit = limit


class CancellationToken:
    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass
class DriverEvent:
    type: Literal["token", "tool_call", "tool_result"]
    content: str = ""
    name: str = ""
    data: Dict[str, Any] = field(default_factory=dict)


Emit = Callable[[DriverEvent], Awaitable[None]]


class ConversationDriver:
    """Alternates model turns and tool batches until the model stops asking for tools."""

    def __init__(
        self,
        model: ChatModel,
        registry: ToolRegistry,
        ctx: ToolContext,
        max_iterations: int = CONFIG.max_iterations,
        tool_concurrency: int = CONFIG.tool_concurrency,
    ) -> None:
        self.model = model
        self.registry = registry
        self.ctx = ctx
        self.max_iterations = max_iterations
        self.tool_concurrency = max(1, tool_concurrency)

    async def run(
        self,
        system: str,
        messages: Sequence[HistoryItem],
        emit: Emit,
        token: Optional[CancellationToken] = None,
    ) -> List[HistoryItem]:
        token = token or CancellationToken()
        history: List[HistoryItem] = list(messages)
        declarations = self.registry.declarations()
        state = DriverState.AGENT_TURN
        turns = 0
        turn: Optional[AssistantTurn] = None

        while state is not DriverState.TERMINATED:
            if state is DriverState.AGENT_TURN:
                if token.cancelled:
                    break
                turns += 1
                if turns > self.max_iterations:
                    raise MaxIterationsExceeded(self.max_iterations)
                turn = await self._agent_turn(system, history, declarations, emit, token)
                history.append(turn)
                if token.cancelled:
                    break
                state = next_state(state, turn)
            else:
                outcomes = await self._execute(turn.tool_calls if turn else [], emit, token)
                history.extend(outcomes)
                state = next_state(state)

        logging.info(json.dumps({
            "ts": datetime.utcnow().isoformat(),
            "tool": "driver",
            "fn": "run",
            "turns": turns,
            "cancelled": token.cancelled,
        }))
        return history

    async def _agent_turn(
        self,
        system: str,
        history: List[HistoryItem],
        declarations: List[Dict[str, Any]],
        emit: Emit,
        token: CancellationToken,
    ) -> AssistantTurn:
        text: List[str] = []
        calls: List[ToolInvocation] = []
        async for chunk in self.model.stream_turn(system, history, declarations):
            if isinstance(chunk, ToolInvocation):
                calls.append(chunk)
            elif chunk:
                text.append(chunk)
                await self._emit(emit, token, DriverEvent("token", content=chunk))
            if token.cancelled:
                break
        return AssistantTurn(text="".join(text), tool_calls=calls)

    async def _execute(
        self,
        calls: List[ToolInvocation],
        emit: Emit,
        token: CancellationToken,
    ) -> List[ToolOutcome]:
        if self.tool_concurrency == 1 or len(calls) < 2:
            outcomes = []
            for call in calls:
                if token.cancelled:
                    break
                outcomes.append(await self._run_one(call, emit, token))
            return outcomes

        sem = asyncio.Semaphore(self.tool_concurrency)

        async def bounded(call: ToolInvocation) -> ToolOutcome:
            async with sem:
                return await self._run_one(call, emit, token)

        return list(await asyncio.gather(*(bounded(c) for c in calls)))

    async def _run_one(self, call: ToolInvocation, emit: Emit, token: CancellationToken) -> ToolOutcome:
        await self._emit(emit, token, DriverEvent("tool_call", name=call.name, data=call.arguments))
        job = self.registry.invoke(call, self.ctx)
        tool = self.registry.get(call.name)
        if tool is not None and tool.mutates:
            # A write that has started is allowed to land even if the request goes away.
            outcome = await asyncio.shield(asyncio.ensure_future(job))
        else:
            outcome = await job
        await self._emit(emit, token, DriverEvent("tool_result", name=call.name, data=outcome.result))
        return outcome

    @staticmethod
    async def _emit(emit: Emit, token: CancellationToken, event: DriverEvent) -> None:
        if not token.cancelled:
            await emit(event)
