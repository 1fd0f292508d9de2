"""Pytest configuration for the pipe test suite.

Streams are served in-process by ``httpx.MockTransport``; no test touches the
network. ``ScriptedStream`` yields a fixed list of chunks and can be told to
hang afterwards, which lets tests observe a live stream and cancel it.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

import httpx
import pytest

from academio_pipe.config import reset_config_cache

_ENV_VARS = (
    "ACADEMIO_BASE_URL",
    "ACADEMIO_TOKEN",
    "academio_token",
    "ACADEMIO_DATA_PREFIX",
    "ACADEMIO_PIPE_CONFIG_FILE",
    "ACADEMIO_TIMEOUT_CONNECT_SECONDS",
    "ACADEMIO_TIMEOUT_HTTP_SECONDS",
    "ACADEMIO_STREAM_CEILING_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Run every test without ambient pipe configuration."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


def _encode_events(*events: Dict[str, Any]) -> bytes:
    return b"".join(f"data: {json.dumps(e)}\n\n".encode("utf-8") for e in events)


@pytest.fixture()
def sse() -> Callable[..., bytes]:
    """Encode events the way the chat server frames them: ``data: {json}\\n\\n``."""
    return _encode_events


class ScriptedStream(httpx.AsyncByteStream):
    """Response body yielding ``chunks`` then, optionally, never finishing."""

    def __init__(self, chunks: Iterable[bytes], *, hang: bool = False) -> None:
        self._chunks = list(chunks)
        self._hang = hang
        self.sent = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self._chunks:
            self.sent += 1
            yield chunk
            await asyncio.sleep(0)
        if self._hang:
            await asyncio.Event().wait()

    async def aclose(self) -> None:
        self.closed = True


class StreamServer:
    """Handler for ``httpx.MockTransport`` recording requests.

    ``respond`` queues the next response; each request pops one (the last one
    is reused when the queue runs dry).
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.streams: List[ScriptedStream] = []
        self._queue: List[Callable[[], httpx.Response]] = []

    def respond(
        self,
        chunks: Iterable[bytes] = (),
        *,
        status: int = 200,
        hang: bool = False,
    ) -> "StreamServer":
        chunks = list(chunks)

        def _build() -> httpx.Response:
            stream = ScriptedStream(chunks, hang=hang)
            self.streams.append(stream)
            return httpx.Response(status, stream=stream, headers={"content-type": "text/event-stream"})

        self._queue.append(_build)
        return self

    def respond_json(self, payload: Any, *, status: int = 200) -> "StreamServer":
        self._queue.append(lambda: httpx.Response(status, json=payload))
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        build = self._queue.pop(0) if len(self._queue) > 1 else self._queue[0]
        return build()

    @property
    def last_stream(self) -> Optional[ScriptedStream]:
        return self.streams[-1] if self.streams else None


@pytest.fixture()
def server() -> StreamServer:
    return StreamServer()


@pytest.fixture()
def transport(server: StreamServer) -> httpx.MockTransport:
    return httpx.MockTransport(server)


@pytest.fixture()
def client(transport: httpx.MockTransport) -> httpx.AsyncClient:
    """Unopened client over the mock transport; tests close it themselves if needed."""
    return httpx.AsyncClient(base_url="http://academio.test", transport=transport)


class Recorder:
    """Observer capturing every callback in order."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def on_start(self, event) -> None:
        self.calls.append(("start", event))

    def on_delta(self, text, delta) -> None:
        self.calls.append(("delta", text, delta))

    def on_done(self, event, text) -> None:
        self.calls.append(("done", event, text))

    def on_message(self, message) -> None:
        self.calls.append(("message", message))

    def on_error(self, message) -> None:
        self.calls.append(("error", message))

    def kinds(self) -> List[str]:
        return [c[0] for c in self.calls]


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()
