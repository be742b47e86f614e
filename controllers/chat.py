# controllers/chat.py
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from errors import GatewayError, TransportError
from models import ChatMetadata, ChatSource

logger = logging.getLogger(__name__)


@dataclass
class ChatMessage:
    role: str  # "user" | "assistant"
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
    sources: List[ChatSource] = field(default_factory=list)
    metadata: Optional[ChatMetadata] = None
    failed: bool = False


class ChatConversation:
    """Message history for the assistant side panel.

    The assistant service hands back a session id with every answer; it is
    sent with the next question so the service can keep its own context.
    """

    def __init__(self, gateway: Any, api_url: str = ""):
        self.gateway = gateway
        self.api_url = api_url
        self.messages: List[ChatMessage] = []
        self.session_id: Optional[str] = None

    async def ask(self, query: str) -> Optional[ChatMessage]:
        query = (query or "").strip()
        if not query:
            return None
        self.messages.append(ChatMessage(role="user", content=query))
        try:
            response = await self.gateway.send_message(query, self.session_id)
        except TransportError as e:
            logger.warning(f"assistant unreachable: {e}")
            reply = ChatMessage(
                role="assistant",
                content=f"Connection error: please ensure the backend server is running at {self.api_url}",
                failed=True,
            )
        except GatewayError as e:
            logger.warning(f"assistant request failed: {e}")
            reply = ChatMessage(
                role="assistant",
                content="Sorry, I encountered an error. Please try again.",
                failed=True,
            )
        else:
            self.session_id = response.session_id
            reply = ChatMessage(
                role="assistant",
                content=response.answer,
                sources=list(response.sources),
                metadata=response.meta,
            )
        self.messages.append(reply)
        return reply

    def reset(self) -> None:
        self.messages = []
        self.session_id = None
