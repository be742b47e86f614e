# tests/test_chat.py
import pytest

from controllers.chat import ChatConversation
from errors import TransportError, UnexpectedError
from models import ChatResponse


class DummyChatGateway:
    def __init__(self, error=None):
        self.error = error
        self.sent = []

    async def send_message(self, query, session_id=None):
        self.sent.append((query, session_id))
        if self.error:
            raise self.error
        return ChatResponse.model_validate({
            "answer": f"re: {query}", "sessionId": "s-1",
            "sources": [{"entityType": "task", "entityId": "t1", "citation": "Task Ship"}],
        })


@pytest.mark.asyncio
async def test_session_id_is_carried_forward():
    gateway = DummyChatGateway()
    chat = ChatConversation(gateway)
    await chat.ask("first")
    reply = await chat.ask("second")
    assert gateway.sent == [("first", None), ("second", "s-1")]
    assert reply.content == "re: second"
    assert reply.sources[0].citation == "Task Ship"
    assert [m.role for m in chat.messages] == ["user", "assistant", "user", "assistant"]


@pytest.mark.asyncio
async def test_blank_question_is_ignored():
    chat = ChatConversation(DummyChatGateway())
    assert await chat.ask("   ") is None
    assert chat.messages == []


@pytest.mark.asyncio
async def test_unreachable_backend_names_the_url():
    chat = ChatConversation(DummyChatGateway(TransportError("refused")), api_url="http://api.test")
    reply = await chat.ask("hello")
    assert reply.failed
    assert "http://api.test" in reply.content


@pytest.mark.asyncio
async def test_other_failures_get_generic_reply():
    chat = ChatConversation(DummyChatGateway(UnexpectedError("500")))
    reply = await chat.ask("hello")
    assert reply.content == "Sorry, I encountered an error. Please try again."
    chat.reset()
    assert chat.messages == [] and chat.session_id is None


@pytest.mark.asyncio
async def test_dashboard_chat_uses_session_transport(dashboard):
    reply = await dashboard.chat.ask("what is late?")
    assert reply.content == "echo: what is late?"
    assert reply.metadata.from_cache


def test_response_metadata_reads_from_wire_name():
    response = ChatResponse.model_validate({
        "answer": "ok", "sessionId": "s-1",
        "metadata": {"processingTime": 40, "fromCache": True, "stepsExecuted": ["retrieve"]},
    })
    assert response.meta.from_cache
    assert response.meta.steps_executed == ["retrieve"]
    assert response.model_dump(by_alias=True)["metadata"]["processingTime"] == 40
