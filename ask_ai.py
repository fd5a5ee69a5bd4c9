import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

import http_client
from ai_context import AiContext

logger = logging.getLogger(__name__)


@dataclass
class ChatTurn:
    user_query: str
    response: str
    image_box: List[Any] = field(default_factory=list)
    chat_history: List[str] = field(default_factory=list)


class ChatSession:
    """Conversation with the AI query service about the selected files."""

    def __init__(
        self,
        backend_url: str,
        parent_id: str,
        context: Optional[AiContext] = None,
        chat_history: Optional[List[str]] = None,
        timeout_s: float = 120.0,
    ):
        self.backend_url = backend_url.rstrip("/")
        self.parent_id = parent_id
        self.context = context if context is not None else AiContext()
        self.chat_history: List[str] = list(chat_history or [])
        self.turns: List[ChatTurn] = []
        self.timeout_s = timeout_s

    def send(self, query: str) -> Optional[ChatTurn]:
        q = (query or "").strip()
        if not q:
            return None
        payload = http_client.post_json(
            f"{self.backend_url}/ask_ai",
            {
                "db_info": self.context.db_info,
                "query": q,
                "chat_history": self.chat_history,
                "parent_id": self.parent_id,
            },
            timeout_s=self.timeout_s,
        )
        if not isinstance(payload, dict):
            payload = {}

        text = payload.get("response")
        images = payload.get("image_box")
        if not isinstance(images, list):
            images = payload.get("images")
        history = payload.get("chat_history")

        turn = ChatTurn(
            user_query=q,
            response=text if isinstance(text, str) else "",
            image_box=images if isinstance(images, list) else [],
            chat_history=list(history) if isinstance(history, list) else list(self.chat_history),
        )
        self.chat_history = list(turn.chat_history)
        self.turns.append(turn)
        logger.info("AI answered %d chars (%d images)", len(turn.response), len(turn.image_box))
        return turn

    def pairs(self) -> List[dict]:
        return [{"user": t.user_query, "ai": t.response} for t in self.turns]
