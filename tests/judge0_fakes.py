"""In-process stand-in for a Judge0 deployment, served through ``httpx.MockTransport``."""
from __future__ import annotations

import base64
import json
from typing import Any, Callable, Dict, List, Optional

import httpx

from codejudge.core.config import Settings
from codejudge.features.judge0.service import Judge0Client


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def unb64(text: Optional[str]) -> str:
    return base64.b64decode(text).decode("utf-8") if text else ""


def result_payload(token: str, status_id: int, description: str = "", stdout: str = "", **extra: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "token": token,
        "status": {"id": status_id, "description": description},
        "stdout": b64(stdout) if stdout else None,
        "stderr": None,
        "compile_output": None,
        "message": None,
        "time": "0.004",
        "memory": 1024,
        "exit_code": 0,
        "exit_signal": None,
    }
    payload.update(extra)
    return payload


def two_sum(stdin: str) -> str:
    nums = stdin.split()
    n = int(nums[0])
    arr = [int(x) for x in nums[1 : n + 1]]
    k = int(nums[n + 1])
    for i in range(n):
        for j in range(i + 1, n):
            if arr[i] + arr[j] == k:
                return f"{i} {j}\n"
    return "-1 -1\n"


def echo(stdin: str) -> str:
    return stdin


class FakeClock:
    """Records sleeps instead of waiting."""

    def __init__(self) -> None:
        self.sleeps: List[float] = []

    @property
    def now(self) -> float:
        return sum(self.sleeps)

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


class FakeJudge0:
    """Scripted Judge0.

    ``program`` maps decoded stdin to stdout; the verdict is Accepted when the
    trimmed stdout equals the trimmed expected output, otherwise Wrong Answer.
    Each token answers ``Processing`` for ``processing_polls`` GETs first.
    """

    def __init__(
        self,
        program: Callable[[str], str] = echo,
        *,
        batch_supported: bool = True,
        processing_polls: int = 1,
        languages: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self.program = program
        self.batch_supported = batch_supported
        self.processing_polls = processing_polls
        self.languages = [{"id": 54, "name": "C++ (GCC 9.2.0)"}] if languages is None else languages
        self.requests: List[httpx.Request] = []
        self.submitted: List[Dict[str, Any]] = []
        self.bodies: Dict[str, Dict[str, Any]] = {}
        self.poll_counts: Dict[str, int] = {}
        self.poll_order: List[str] = []
        self.overrides: Dict[str, Dict[str, Any]] = {}
        self.never_finish: set[str] = set()
        self.flaky: Dict[str, int] = {}

    # -- helpers for assertions --
    def calls(self, method: str, path_prefix: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path.startswith(path_prefix)]

    def _new_token(self, body: Dict[str, Any]) -> str:
        token = f"tok-{len(self.bodies)}"
        self.bodies[token] = body
        return token

    def _judge(self, token: str) -> Dict[str, Any]:
        if token in self.overrides:
            return self.overrides[token]
        body = self.bodies[token]
        stdout = self.program(unb64(body["stdin"]))
        expected = unb64(body["expected_output"])
        if stdout.strip() == expected.strip():
            return result_payload(token, 3, "Accepted", stdout)
        return result_payload(token, 4, "Wrong Answer", stdout)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "GET" and path == "/languages":
            return httpx.Response(200, json=self.languages)
        if request.method == "POST" and path == "/submissions/batch":
            if not self.batch_supported:
                return httpx.Response(404, json={"error": "batch submissions are disabled"})
            subs = json.loads(request.content)["submissions"]
            self.submitted.extend(subs)
            return httpx.Response(201, json=[{"token": self._new_token(s)} for s in subs])
        if request.method == "POST" and path == "/submissions":
            body = json.loads(request.content)
            self.submitted.append(body)
            token = self._new_token(body)
            if request.url.params.get("wait") == "true":
                return httpx.Response(201, json=self._judge(token))
            return httpx.Response(201, json={"token": token})
        if request.method == "GET" and path.startswith("/submissions/"):
            token = path.rsplit("/", 1)[1]
            self.poll_order.append(token)
            if token not in self.bodies:
                return httpx.Response(404, json={"error": "not found"})
            count = self.poll_counts.get(token, 0) + 1
            self.poll_counts[token] = count
            if self.flaky.get(token, 0) >= count:
                raise httpx.ConnectError("connection reset", request=request)
            if token in self.never_finish or count <= self.processing_polls + self.flaky.get(token, 0):
                return httpx.Response(200, json=result_payload(token, 2, "Processing"))
            return httpx.Response(200, json=self._judge(token))
        return httpx.Response(404, json={"error": "unknown route"})

    def client(self, settings: Settings, clock: FakeClock, **kwargs: Any) -> Judge0Client:
        return Judge0Client(settings, transport=httpx.MockTransport(self.handler), sleep=clock.sleep, **kwargs)
