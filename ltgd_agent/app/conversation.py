"""
In-memory conversation state for one chat.

Rationale:
- At most one request in flight: a send while pending is refused.
- The model reply starts as a pending placeholder and is replaced exactly once
  by the completed entry (same id).
- Nothing is persisted; history lives as long as the controller.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from .errors import ConversationBusyError, ConversationClosedError
from .report import ReportService
from .schemas import ConversationEntry

logger = logging.getLogger(__name__)

GREETING = (
    "Hello! I am LTGD, your specialized AI agent for analyzing long-term US government debt. "
    "What would you like to know? You can ask about current yields, historical trends, "
    "or factors influencing demand."
)

EXAMPLE_PROMPTS = [
    "What's the current trend for the 10-year Treasury yield?",
    "Show me a chart of US inflation vs. 30-year bond rates over the last 5 years.",
    "How does the Federal Reserve's policy affect long-term debt demand?",
    "Compare US long-term debt to that of Germany and Japan.",
]


def _new_id(role: str) -> str:
    return f"{role}-{uuid.uuid4().hex}"


class ConversationController:
    def __init__(self, service: ReportService):
        self.service = service
        self._entries: List[ConversationEntry] = [
            ConversationEntry(id="init1", role="model", text=GREETING)
        ]
        self._pending_id: Optional[str] = None
        self._closed = False

    @property
    def entries(self) -> Tuple[ConversationEntry, ...]:
        return tuple(self._entries)

    @property
    def is_pending(self) -> bool:
        return self._pending_id is not None

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _drop(self, entry_id: str) -> None:
        self._entries = [e for e in self._entries if e.id != entry_id]

    def close(self) -> None:
        """Stop accepting results; a reply still in flight is discarded."""
        self._closed = True

    async def send(self, prompt: str) -> ConversationEntry:
        """
        Append the user's message, wait for the report and return the model entry.
        """
        if not prompt or not prompt.strip():
            raise ValueError("prompt must not be empty")
        if self._closed:
            raise ConversationClosedError("conversation is closed")
        if self.is_pending:
            raise ConversationBusyError("a request is already pending")

        placeholder = ConversationEntry(id=_new_id("model"), role="model", pending=True)
        self._entries.append(ConversationEntry(id=_new_id("user"), role="user", text=prompt))
        self._entries.append(placeholder)
        self._pending_id = placeholder.id

        try:
            result = await self.service.generate_report(prompt)
        except BaseException:
            # Cancelled or failed: the placeholder must not outlive its request
            self._drop(placeholder.id)
            raise
        finally:
            self._pending_id = None

        entry = placeholder.model_copy(update={
            "text": result.analysis,
            "chart": result.chart,
            "sources": result.sources,
            "pending": False,
        })
        if self._closed:
            logger.info(f"Conversation closed; discarding reply {placeholder.id}")
            self._drop(placeholder.id)
            return entry

        index = next(i for i, e in enumerate(self._entries) if e.id == placeholder.id)
        self._entries[index] = entry
        return entry
