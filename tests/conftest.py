# tests/conftest.py
import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from lucidiq.app import create_app
from lucidiq.config import Settings
from lucidiq.llm_client import CompletionClient
from lucidiq.service import ProductService


def completion(content):
    message = SimpleNamespace(role="assistant", content=content)
    return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeCompletions:
    """Stands in for `OpenAI().chat.completions`; records every call."""

    def __init__(self):
        self.calls = []
        self.replies = []

    def queue(self, reply):
        self.replies.append(reply)

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        return completion(reply) if isinstance(reply, str) else reply


class FakeOpenAI:
    def __init__(self):
        self.chat = SimpleNamespace(completions=FakeCompletions())


@pytest.fixture
def settings():
    return Settings(api_key="test-key", base_url="https://llm.invalid")


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def completions(fake_openai):
    return fake_openai.chat.completions


@pytest.fixture
def service(settings, fake_openai):
    return ProductService(settings, CompletionClient(settings, client=fake_openai))


@pytest.fixture
def client(settings, service):
    return TestClient(create_app(settings, service))
