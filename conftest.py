from datetime import datetime, timezone

import pytest

from exhibit_guide.llm import ConfigurationError
from exhibit_guide.models import Completion
from exhibit_guide.storage import PersistenceError, Storage

OLD_TIMESTAMP = datetime(2024, 1, 1, tzinfo=timezone.utc)


class StubProvider:
    """Records every call and answers from a queue of canned replies.

    Each queued reply is a str, a Completion, or an exception to raise.
    When the queue is empty the default completion is returned.
    """

    def __init__(self, api_key: str = "test-key") -> None:
        self.api_key = api_key
        self.calls: list[dict] = []
        self.replies: list = []
        self.default = Completion(text="Generated text.", token_count=42)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def queue(self, *replies) -> None:
        self.replies.extend(replies)

    async def complete(self, messages, max_tokens=500, temperature=0.7) -> Completion:
        if not self.configured:
            raise ConfigurationError("LLM provider API key is not configured")
        self.calls.append({
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            return Completion(text=reply, token_count=None)
        return reply


class FailingAuditLog:
    """An audit sink whose writes always fail."""

    def __init__(self) -> None:
        self.attempts = 0

    def append_interaction(self, record):
        self.attempts += 1
        raise PersistenceError("interaction log is read-only")


@pytest.fixture
def storage(tmp_path) -> Storage:
    return Storage(tmp_path / "data")


@pytest.fixture
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def make_item(storage):
    """Create a catalog item with an old updated_at so bumps are observable."""

    def _make(name="Spitfire Mk I", type="Aircraft", **fields):
        item = storage.create_item(name, type, **fields)
        item.updated_at = OLD_TIMESTAMP
        storage.save_item(item)
        return item

    return _make


@pytest.fixture
def unconfigured_provider() -> StubProvider:
    return StubProvider(api_key="")


@pytest.fixture
def failing_audit_log() -> FailingAuditLog:
    return FailingAuditLog()
