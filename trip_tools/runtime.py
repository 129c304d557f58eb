from typing import Optional
import asyncio
import logging

import httpx

from .config import CONFIG


class Runtime:
    """Owns the process-wide HTTP client.

    The first caller of ``client()`` creates it; concurrent callers wait on the
    same future instead of each building their own.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout if timeout is not None else CONFIG.http_timeout_sec
        self._client_future: Optional[asyncio.Future] = None

    async def client(self) -> httpx.AsyncClient:
        if self._client_future is None:
            loop = asyncio.get_running_loop()
            self._client_future = loop.create_future()
            try:
                client = httpx.AsyncClient(
                    timeout=self._timeout,
                    headers={"User-Agent": CONFIG.user_agent},
                )
            except Exception as e:
                self._client_future.set_exception(e)
                future, self._client_future = self._client_future, None
                return await future
            self._client_future.set_result(client)
        return await self._client_future

    async def startup(self) -> httpx.AsyncClient:
        client = await self.client()
        logging.info("runtime started")
        return client

    async def shutdown(self) -> None:
        future, self._client_future = self._client_future, None
        if future is None or not future.done() or future.exception() is not None:
            return
        await future.result().aclose()
        logging.info("runtime stopped")


RUNTIME = Runtime()
