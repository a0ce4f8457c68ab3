import asyncio
import json

import httpx
import pytest

from chat_core.domain.exceptions import ExhaustedRetriesError, RequestTimeoutError, TransportError
from chat_core.domain.models import OutboundMessage
from chat_core.infrastructure.scheduling import AsyncioScheduler
from chat_core.providers.http_client import LiveChatClient


OK_BODY = {"reply": "ok", "conversation_id": "server-id", "confidence": 0.8}


class Resp:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body

    @property
    def is_success(self):
        return 200 <= self.status_code < 300

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


def install_client(monkeypatch, outcomes):
    """Replace httpx.AsyncClient; each post consumes the next outcome (the last one repeats)."""

    calls = []
    queue = list(outcomes)

    class Client:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, headers=None, **_):
            calls.append({"url": url, "json": json, "headers": headers})
            item = queue.pop(0) if len(queue) > 1 else queue[0]
            if isinstance(item, Exception):
                raise item
            return item

    monkeypatch.setattr("httpx.AsyncClient", Client)
    return calls


def message():
    return OutboundMessage(message="hello", conversation_id="client-id", client_timestamp="2024-01-01T00:00:00.000Z")


def test_live_client_success_first_attempt(monkeypatch, cfg, scheduler):
    calls = install_client(monkeypatch, [Resp(200, OK_BODY)])
    reply = asyncio.run(LiveChatClient(cfg, scheduler=scheduler).send(message()))

    assert reply.reply == "ok"
    # server id is returned verbatim, not reconciled
    assert reply.conversation_id == "server-id"
    assert reply.confidence == 0.8
    assert len(calls) == 1
    assert calls[0]["url"] == "http://backend.test/chat"
    assert calls[0]["headers"] == {"Content-Type": "application/json"}
    assert calls[0]["json"] == {
        "message": "hello",
        "conversation_id": "client-id",
        "metadata": {"role": "recruiter", "client_timestamp": "2024-01-01T00:00:00.000Z"},
    }
    assert scheduler.sleeps == []
    assert scheduler.timeouts == [10.0]


def test_live_client_recovers_after_three_server_errors(monkeypatch, cfg, scheduler):
    calls = install_client(monkeypatch, [Resp(500), Resp(500), Resp(500), Resp(200, OK_BODY)])
    reply = asyncio.run(LiveChatClient(cfg, scheduler=scheduler).send(message()))

    assert reply.reply == "ok"
    assert len(calls) == 4
    assert scheduler.sleeps == [1.0, 2.0, 4.0]


def test_live_client_exhausts_retries(monkeypatch, cfg, scheduler):
    calls = install_client(monkeypatch, [Resp(500)])
    client = LiveChatClient(cfg, scheduler=scheduler)

    with pytest.raises(ExhaustedRetriesError) as exc_info:
        asyncio.run(client.send(message()))

    err = exc_info.value
    assert err.attempts == 4
    assert isinstance(err.last_error, TransportError)
    assert err.last_error.http_status == 500
    assert err.__cause__ is err.last_error
    assert len(calls) == 4
    assert scheduler.sleeps == [1.0, 2.0, 4.0]


def test_live_client_retry_count_follows_max_retries(monkeypatch, cfg, scheduler):
    cfg.max_retries = 5
    calls = install_client(monkeypatch, [Resp(503)])

    with pytest.raises(ExhaustedRetriesError) as exc_info:
        asyncio.run(LiveChatClient(cfg, scheduler=scheduler).send(message()))

    assert exc_info.value.attempts == 6
    assert len(calls) == 6
    assert scheduler.sleeps == [1.0, 2.0, 4.0, 8.0, 16.0]


def test_live_client_no_retries(monkeypatch, cfg, scheduler):
    cfg.max_retries = 0
    calls = install_client(monkeypatch, [Resp(404)])

    with pytest.raises(ExhaustedRetriesError) as exc_info:
        asyncio.run(LiveChatClient(cfg, scheduler=scheduler).send(message()))

    assert exc_info.value.attempts == 1
    assert len(calls) == 1
    assert scheduler.sleeps == []


def test_live_client_timeouts_on_every_attempt(monkeypatch, cfg, expiring_scheduler):
    install_client(monkeypatch, [Resp(200, OK_BODY)])

    with pytest.raises(ExhaustedRetriesError) as exc_info:
        asyncio.run(LiveChatClient(cfg, scheduler=expiring_scheduler).send(message()))

    assert isinstance(exc_info.value.last_error, RequestTimeoutError)
    assert expiring_scheduler.timeouts == [10.0, 10.0, 10.0, 10.0]
    assert expiring_scheduler.sleeps == [1.0, 2.0, 4.0]


def test_live_client_retries_connection_errors(monkeypatch, cfg, scheduler):
    calls = install_client(monkeypatch, [httpx.ConnectError("refused"), Resp(200, OK_BODY)])
    reply = asyncio.run(LiveChatClient(cfg, scheduler=scheduler).send(message()))

    assert reply.reply == "ok"
    assert len(calls) == 2
    assert scheduler.sleeps == [1.0]


def test_live_client_maps_httpx_timeout(monkeypatch, cfg, scheduler):
    cfg.max_retries = 0
    install_client(monkeypatch, [httpx.ReadTimeout("slow")])

    with pytest.raises(ExhaustedRetriesError) as exc_info:
        asyncio.run(LiveChatClient(cfg, scheduler=scheduler).send(message()))

    assert isinstance(exc_info.value.last_error, RequestTimeoutError)


def test_live_client_retries_malformed_body(monkeypatch, cfg, scheduler):
    calls = install_client(
        monkeypatch,
        [Resp(200, ValueError("not json")), Resp(200, {"reply": "x"}), Resp(200, OK_BODY)],
    )
    reply = asyncio.run(LiveChatClient(cfg, scheduler=scheduler).send(message()))

    assert reply.reply == "ok"
    assert len(calls) == 3
    assert scheduler.sleeps == [1.0, 2.0]


def test_live_client_passes_timeout_to_httpx(monkeypatch, cfg, scheduler):
    captured = {}

    class Client:
        def __init__(self, *a, **kw):
            captured.update(kw)

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, *a, **kw):
            return Resp(200, OK_BODY)

    monkeypatch.setattr("httpx.AsyncClient", Client)
    asyncio.run(LiveChatClient(cfg, scheduler=scheduler).send(message()))

    assert captured["timeout"] == 10.0
    assert captured["trust_env"] is False


def test_live_client_with_real_async_client(cfg, scheduler):
    seen = []

    def handler(request):
        seen.append(request)
        if len(seen) == 1:
            return httpx.Response(500)
        return httpx.Response(200, json=OK_BODY)

    client = LiveChatClient(cfg, scheduler=scheduler, transport=httpx.MockTransport(handler))
    reply = asyncio.run(client.send(message()))

    assert reply.reply == "ok"
    assert len(seen) == 2
    assert scheduler.sleeps == [1.0]
    request = seen[-1]
    assert str(request.url) == "http://backend.test/chat"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content)["conversation_id"] == "client-id"
    # every httpx phase gets the full TIMEOUT_MS, not the library default
    assert request.extensions["timeout"] == {"connect": 10.0, "read": 10.0, "write": 10.0, "pool": 10.0}


def test_slow_reply_within_deadline_is_accepted(cfg):
    cfg.max_retries = 0
    cfg.timeout_ms = 1000

    async def handler(request):
        await asyncio.sleep(0.05)
        return httpx.Response(200, json=OK_BODY)

    client = LiveChatClient(cfg, scheduler=AsyncioScheduler(), transport=httpx.MockTransport(handler))
    assert asyncio.run(client.send(message())).reply == "ok"


def test_hanging_backend_times_out_with_real_scheduler(cfg):
    cfg.max_retries = 0
    cfg.timeout_ms = 20
    cancelled = []

    async def handler(request):
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise
        return httpx.Response(200, json=OK_BODY)

    client = LiveChatClient(cfg, scheduler=AsyncioScheduler(), transport=httpx.MockTransport(handler))
    with pytest.raises(ExhaustedRetriesError) as exc_info:
        asyncio.run(client.send(message()))

    assert isinstance(exc_info.value.last_error, RequestTimeoutError)
    assert cancelled == [True]
