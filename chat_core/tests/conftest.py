import asyncio

import pytest


class FakeScheduler:
    """Records delays instead of sleeping; can expire every timed call."""

    def __init__(self, expire: bool = False):
        self.expire = expire
        self.sleeps = []
        self.timeouts = []
        self.gate = None

    async def sleep(self, seconds):
        self.sleeps.append(seconds)
        if self.gate is not None:
            await self.gate.wait()

    async def run_with_timeout(self, awaitable, seconds):
        self.timeouts.append(seconds)
        if self.expire:
            awaitable.close()
            raise asyncio.TimeoutError()
        return await awaitable


class SettingsStub:
    api_base_url = "http://backend.test"
    chat_endpoint = "/chat"
    max_retries = 3
    timeout_ms = 10000
    use_mock = False
    mock_min_latency_ms = 1200
    mock_max_latency_ms = 2000

    @property
    def chat_url(self):
        return f"{self.api_base_url}{self.chat_endpoint}"


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def expiring_scheduler():
    return FakeScheduler(expire=True)


@pytest.fixture
def cfg():
    return SettingsStub()
