import os
from typing import Final


class _Config:
    def __init__(self) -> None:
        # Model
        self.gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")
        try:
            self.temperature: float = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
        except ValueError:
            self.temperature = 0.7

        # Conversation loop
        try:
            self.max_iterations: int = int(os.getenv("AGENT_MAX_ITERATIONS", "25"))
        except ValueError:
            self.max_iterations = 25
        try:
            self.tool_concurrency: int = max(1, int(os.getenv("AGENT_TOOL_CONCURRENCY", "1")))
        except ValueError:
            self.tool_concurrency = 1

        # Inbound requests
        self.rate_limit: str = os.getenv("AGENT_RATE_LIMIT", "20/minute")
        self.user_id_header: str = os.getenv("USER_ID_HEADER", "x-user-id").lower()


CONFIG: Final[_Config] = _Config()
