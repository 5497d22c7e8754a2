"""
Shared test configuration and fixtures.
"""

import io
import json
import sys
from pathlib import Path

import httpx
import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

# Add src to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Load environment from project root .env file
project_env_file = project_root / ".env"
if project_env_file.exists():
    load_dotenv(project_env_file)

from chat_proxy.config import Settings  # noqa: E402
from chat_proxy.logger import create_sanitized_logger  # noqa: E402
from chat_proxy.main import create_app  # noqa: E402

UPSTREAM_URL = "http://fake-upstream.test/v1/chat/completions"
UPSTREAM_API_KEY = "hf_testkey123456"

UPSTREAM_SUCCESS = {
    "id": "chatcmpl-upstream-id",
    "object": "chat.completion",
    "created": 1699123456,
    "model": "meta-llama/Llama-2-7b-chat-hf",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "The capital of France is Paris."},
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 15, "completion_tokens": 8, "total_tokens": 23},
}


class RecordingUpstream:
    """httpx.MockTransport handler that records every request it receives."""

    def __init__(self, status_code=200, json_body=None, content=None):
        self.status_code = status_code
        self.json_body = UPSTREAM_SUCCESS if json_body is None and content is None else json_body
        self.content = content
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def bodies(self):
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def settings():
    """Settings pointing at a fake upstream, with proxy auth disabled."""
    return Settings(
        hugging_face_api_url=UPSTREAM_URL,
        hugging_face_api_key=UPSTREAM_API_KEY,
        use_third_party_router=False,
        third_party_router_url=None,
        auth_key=None,
        log_level="debug",
    )


@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture
def test_logger(log_stream):
    return create_sanitized_logger("debug", stream=log_stream, name="chat_proxy.tests")


@pytest.fixture
def make_client(settings, test_logger):
    """Build a TestClient whose upstream is served by ``handler``."""
    clients = []

    def _make(handler, **overrides):
        app_settings = settings.model_copy(update=overrides)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        app = create_app(settings=app_settings, logger=test_logger, http_client=http_client)
        client = TestClient(app, raise_server_exceptions=False)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
