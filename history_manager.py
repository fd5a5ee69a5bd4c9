import json
import logging
import os
from typing import List

logger = logging.getLogger(__name__)


class HistoryManager:
    """Keeps the AI service's chat_history between runs."""

    def __init__(self, history_path: str, max_items: int = 100):
        self.history_path = history_path
        self.max_items = max_items
        self.history: List[str] = []

    def load(self) -> List[str]:
        if not os.path.exists(self.history_path):
            self.history = []
            return self.history
        try:
            with open(self.history_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable chat history %s: %s", self.history_path, e)
            self.history = []
            return self.history
        if not isinstance(data, list):
            data = []
        self.history = [str(item) for item in data][-self.max_items:]
        return self.history

    def replace(self, history) -> None:
        items = [str(item) for item in (history or [])]
        self.history = items[-self.max_items:]

    def persist(self) -> None:
        # best-effort
        try:
            os.makedirs(os.path.dirname(self.history_path) or ".", exist_ok=True)
            with open(self.history_path, 'w', encoding='utf-8') as f:
                json.dump(self.history, f)
        except OSError as e:
            logger.warning("Could not write chat history %s: %s", self.history_path, e)
