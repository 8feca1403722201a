"""Shared test fixtures."""

import httpx
import pytest

from stablecoin_gateway.http.client import ResilientClient

WEBHOOK_SECRET = "whsec_test_secret_key_for_security_testing"


class RecordingSleep:
    """Stands in for ``asyncio.sleep`` and records requested delays in ms."""

    def __init__(self) -> None:
        self.delays_ms: list[int] = []

    async def __call__(self, seconds: float) -> None:
        self.delays_ms.append(round(seconds * 1000))


class ScriptedGateway:
    """MockTransport handler replaying a fixed list of responses in order."""

    def __init__(self, responses: list[httpx.Response | Exception]) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(result, Exception):
            raise result
        # Fresh copy so a scripted response can be replayed
        return httpx.Response(result.status_code, headers=result.headers, content=result.content)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def webhook_secret() -> str:
    return WEBHOOK_SECRET


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
async def make_client(recording_sleep):
    """Build ResilientClients backed by a scripted MockTransport."""
    created: list[ResilientClient] = []

    def _make(handler, **kwargs) -> ResilientClient:
        kwargs.setdefault("sleep", recording_sleep)
        client = ResilientClient(
            kwargs.pop("base_url", "https://api.test.com"),
            transport=httpx.MockTransport(handler),
            **kwargs,
        )
        created.append(client)
        return client

    yield _make

    for client in created:
        await client.aclose()
