import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import httpx

from codejudge.core.config import Settings, get_settings, normalize_base_url
from .codec import build_request, decode_result, decode_token, encode_submission
from .errors import BatchTimeout, ParseError, PollTimeout, SubmitFailed
from .languages import LanguageRegistry, default_registry
from .schemas import JudgementResult, SubmissionRequest, TestCaseInput

POLL_INTERVAL_S = 1.5
MAX_POLL_ATTEMPTS = 30  # 30 x 1.5s = 45s ceiling
HEALTH_TIMEOUT_S = 5.0
WAIT_TIMEOUT_S = 30.0
RESULT_FIELDS = "token,status,stdout,stderr,compile_output,message,time,memory,exit_code,exit_signal"

Sleep = Callable[[float], Awaitable[Any]]
TestCaseLike = Union[TestCaseInput, Mapping[str, Any]]


def _mask_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    return {k: ("[REDACTED]" if k.lower() == "x-auth-token" else v) for k, v in headers.items()}


class Judge0Client:
    """Long-lived client for one Judge0 deployment.

    Holds a single ``httpx.AsyncClient`` for its whole lifetime; call
    ``reconfigure`` to point it at a different base URL or key.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        registry: Optional[LanguageRegistry] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Sleep] = None,
        poll_interval: float = POLL_INTERVAL_S,
        max_poll_attempts: int = MAX_POLL_ATTEMPTS,
    ) -> None:
        self.settings = settings or get_settings()
        self.registry = registry or default_registry
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.base_url = normalize_base_url(self.settings.judge0_url)
        self.api_key = self.settings.judge0_api_key
        self._transport = transport
        self._sleep: Sleep = sleep or asyncio.sleep
        self._logger = logging.getLogger(__name__)
        self._client = self._build_client()

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        # self-hosted Judge0 auth, not the RapidAPI headers
        if self.api_key:
            headers["X-Auth-Token"] = self.api_key
        return headers

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=httpx.Timeout(self.settings.judge0_timeout_s),
            transport=self._transport,
        )

    async def reconfigure(self, *, base_url: Optional[str] = None, api_key: Optional[str] = None) -> None:
        """Rebuild the HTTP client, optionally switching base URL and auth key."""
        if base_url is not None:
            self.base_url = normalize_base_url(base_url)
        if api_key is not None:
            self.api_key = api_key or None
        old = self._client
        self._client = self._build_client()
        await old.aclose()
        self._logger.info("Judge0 client reconfigured for %s", self.base_url)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "Judge0Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, *, timeout: Optional[float] = None, **kwargs) -> httpx.Response:
        self._logger.debug(
            "Judge0 request: %s %s%s headers=%s", method, self.base_url, path, _mask_headers(self._client.headers)
        )
        if timeout is not None:
            kwargs["timeout"] = timeout
        return await self._client.request(method, path, **kwargs)

    # -------- Health --------
    async def is_healthy(self) -> bool:
        try:
            resp = await self._request("GET", "/languages", timeout=HEALTH_TIMEOUT_S)
            resp.raise_for_status()
            data = resp.json()
        except Exception as exc:
            self._logger.warning("Judge0 health check failed at %s: %s", self.base_url, exc)
            return False
        return isinstance(data, list) and len(data) > 0

    # -------- Single submissions --------
    async def _post_submission(self, request: SubmissionRequest, *, wait: bool, timeout: Optional[float]) -> httpx.Response:
        label = "Judge0 submit (wait)" if wait else "Judge0 submit"
        try:
            resp = await self._request(
                "POST",
                "/submissions",
                params={"base64_encoded": "true", "wait": "true" if wait else "false"},
                json=encode_submission(request),
                timeout=timeout,
            )
        except httpx.HTTPError as exc:
            raise SubmitFailed(f"{label} failed", detail=str(exc) or type(exc).__name__) from exc
        if resp.status_code not in (200, 201):
            raise SubmitFailed(f"{label} failed", detail=resp.text, status_code=resp.status_code)
        return resp

    async def submit_async(self, request: SubmissionRequest) -> str:
        """Queue one submission and return its token without waiting for judgement."""
        resp = await self._post_submission(request, wait=False, timeout=None)
        try:
            return decode_token(resp.json())
        except (ValueError, ParseError) as exc:
            raise SubmitFailed("Judge0 submit failed", detail=resp.text, status_code=resp.status_code) from exc

    async def submit_sync(self, request: SubmissionRequest) -> JudgementResult:
        """Submit with ``wait=true``; Judge0 holds the connection until judgement completes."""
        resp = await self._post_submission(request, wait=True, timeout=WAIT_TIMEOUT_S)
        try:
            data = resp.json()
        except ValueError as exc:
            raise ParseError(f"Waited submit returned non-JSON body: {resp.text[:200]}") from exc
        return decode_result(data)

    def _request_for(self, source_code: str, language: str, stdin: str, expected_output: str) -> SubmissionRequest:
        language_id = self.registry.resolve(language)
        test_case = TestCaseInput(input=stdin, expected_output=expected_output)
        return build_request(source_code, language_id, test_case, self.settings)

    async def submit(self, source_code: str, language: str, stdin: str = "", expected_output: str = "") -> str:
        return await self.submit_async(self._request_for(source_code, language, stdin, expected_output))

    async def submit_wait(
        self, source_code: str, language: str, stdin: str = "", expected_output: str = ""
    ) -> JudgementResult:
        return await self.submit_sync(self._request_for(source_code, language, stdin, expected_output))

    # -------- Polling --------
    async def get_result(self, token: str) -> JudgementResult:
        resp = await self._request(
            "GET",
            f"/submissions/{token}",
            params={"base64_encoded": "true", "fields": RESULT_FIELDS},
        )
        resp.raise_for_status()
        return decode_result(resp.json(), token=token)

    async def _try_get_result(self, token: str, attempt: int) -> Optional[JudgementResult]:
        try:
            return await self.get_result(token)
        except (httpx.HTTPError, ValueError, ParseError) as exc:
            # transient, retried next cycle
            self._logger.warning("Judge0 poll attempt %d for %s failed: %s", attempt + 1, token, exc)
            return None

    async def poll(self, token: str) -> JudgementResult:
        for attempt in range(self.max_poll_attempts):
            await self._sleep(self.poll_interval)
            result = await self._try_get_result(token, attempt)
            if result is not None and result.is_terminal:
                return result
        raise PollTimeout(token, self.max_poll_attempts)

    async def poll_many(self, tokens: Sequence[str]) -> List[JudgementResult]:
        """Poll several tokens independently; results keep the order of ``tokens``."""
        tasks = [asyncio.ensure_future(self.poll(tok)) for tok in tokens]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # one token failed: stop the others instead of leaving them polling
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    # -------- Batch operations --------
    async def submit_batch(self, requests: Sequence[SubmissionRequest]) -> List[str]:
        """Submit all requests in one call; returns tokens in the same order."""
        try:
            resp = await self._request(
                "POST",
                "/submissions/batch",
                params={"base64_encoded": "true"},
                json={"submissions": [encode_submission(r) for r in requests]},
            )
        except httpx.HTTPError as exc:
            raise SubmitFailed("Judge0 batch submit failed", detail=str(exc) or type(exc).__name__) from exc
        if resp.status_code not in (200, 201):
            raise SubmitFailed("Judge0 batch submit failed", detail=resp.text, status_code=resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:
            raise ParseError(f"Batch submit returned non-JSON body: {resp.text[:200]}") from exc
        items = data.get("submission_tokens") if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise ParseError(f"Unexpected batch submit response: {resp.text[:200]}")
        tokens = [decode_token(item) for item in items]
        if len(tokens) != len(requests):
            raise ParseError(f"Token count mismatch in batch response: {len(tokens)} != {len(requests)}")
        return tokens

    async def _submit_batch_or_none(self, requests: Sequence[SubmissionRequest]) -> Optional[List[str]]:
        """Batch-submit, or return None when this deployment cannot take a batch."""
        try:
            tokens = await self.submit_batch(requests)
        except (SubmitFailed, ParseError) as exc:
            self._logger.warning(
                "Judge0 batch mode failed (%s), falling back to sequential wait=true", str(exc)[:80]
            )
            return None
        self._logger.info("Judge0 batch submitted %d tokens, polling for results", len(tokens))
        return tokens

    async def _poll_batch(self, tokens: Sequence[str]) -> List[JudgementResult]:
        results: List[Optional[JudgementResult]] = [None] * len(tokens)
        pending = set(range(len(tokens)))
        for attempt in range(self.max_poll_attempts):
            if not pending:
                break
            await self._sleep(self.poll_interval)
            # one request at a time, in index order
            for idx in sorted(pending):
                result = await self._try_get_result(tokens[idx], attempt)
                if result is not None and result.is_terminal:
                    results[idx] = result
                    pending.discard(idx)
            self._logger.debug("Judge0 batch cycle %d: %d/%d pending", attempt + 1, len(pending), len(tokens))
        if pending:
            raise BatchTimeout(pending, len(tokens))
        return [res for res in results if res is not None]

    async def _run_sequential(self, requests: Sequence[SubmissionRequest]) -> List[JudgementResult]:
        results: List[JudgementResult] = []
        for idx, request in enumerate(requests):
            self._logger.info("Judge0 sequential: submitting test case %d/%d", idx + 1, len(requests))
            results.append(await self.submit_sync(request))
        return results

    async def run_batch(
        self,
        source_code: str,
        language: str,
        test_cases: Iterable[TestCaseLike],
    ) -> List[JudgementResult]:
        """Judge ``source_code`` against every test case; results follow input order.

        Prefers one batch submission plus polling. If the batch submission call
        itself fails, each test case is submitted with ``wait=true`` in turn.
        """
        cases = [tc if isinstance(tc, TestCaseInput) else TestCaseInput.model_validate(tc) for tc in test_cases]
        if not cases:
            return []
        language_id = self.registry.resolve(language)
        requests = [build_request(source_code, language_id, tc, self.settings) for tc in cases]

        tokens = await self._submit_batch_or_none(requests)
        if tokens is None:
            return await self._run_sequential(requests)
        return await self._poll_batch(tokens)
