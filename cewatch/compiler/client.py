"""Compiler Explorer HTTP client.

One POST per compile, no retries. Transport problems, unusable service URLs
and non-2xx statuses raise ``CompileTransportError``; bodies that are not
the expected JSON shape raise ``CompileProtocolError``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx

from ..errors import CompileProtocolError, CompileTransportError
from .models import (
    AsmLine,
    CompileRequest,
    CompileResult,
    ExecutionResult,
    SourceRef,
    SourceTag,
    StreamLine,
)

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_SECONDS = 10.0
ERROR_BODY_PREVIEW_CHARS = 200


def _expect_int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CompileProtocolError(f"{what} is not an integer: {value!r}")
    return value


def _expect_list(value: object, what: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise CompileProtocolError(f"{what} is not a list")
    return value


def _parse_stream(value: object, what: str) -> tuple[StreamLine, ...]:
    lines: list[StreamLine] = []
    for item in _expect_list(value, what):
        if not isinstance(item, dict) or not isinstance(item.get("text"), str):
            raise CompileProtocolError(f"{what} entry has no text")
        tag = item.get("tag")
        source_tag = None
        if isinstance(tag, dict) and isinstance(tag.get("line"), int):
            label = tag.get("text")
            source_tag = SourceTag(tag["line"], label if isinstance(label, str) else "")
        lines.append(StreamLine(item["text"], source_tag))
    return tuple(lines)


def _parse_asm(value: object) -> tuple[AsmLine, ...]:
    lines: list[AsmLine] = []
    for item in _expect_list(value, "asm"):
        if not isinstance(item, dict) or not isinstance(item.get("text"), str):
            raise CompileProtocolError("asm entry has no text")
        source = item.get("source")
        source_ref = None
        if isinstance(source, dict) and isinstance(source.get("line"), int):
            file = source.get("file")
            source_ref = SourceRef(file if isinstance(file, str) else None, source["line"])
        lines.append(AsmLine(item["text"], source_ref))
    return tuple(lines)


def _parse_execution(value: object) -> ExecutionResult | None:
    if not isinstance(value, dict):
        return None
    if value.get("didExecute") is False:
        return None
    return ExecutionResult(
        exit_code=_expect_int(value.get("code"), "execResult.code"),
        stdout=_parse_stream(value.get("stdout"), "execResult.stdout"),
        stderr=_parse_stream(value.get("stderr"), "execResult.stderr"),
    )


def parse_compile_response(payload: object) -> CompileResult:
    """Map a decoded ``/compile`` JSON response to a ``CompileResult``."""
    if not isinstance(payload, dict):
        raise CompileProtocolError("response is not a JSON object")
    return CompileResult(
        exit_code=_expect_int(payload.get("code"), "code"),
        stdout=_parse_stream(payload.get("stdout"), "stdout"),
        stderr=_parse_stream(payload.get("stderr"), "stderr"),
        assembly=_parse_asm(payload.get("asm")),
        execution=_parse_execution(payload.get("execResult")),
    )


class CompilerExplorerClient:
    """Submit sources to one compiler on a Compiler Explorer instance."""

    def __init__(
        self,
        service_url: str,
        compiler_id: str,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.service_url = service_url.rstrip("/")
        self.compiler_id = compiler_id
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(None, connect=CONNECT_TIMEOUT_SECONDS),
        )

    @property
    def compile_url(self) -> str:
        return f"{self.service_url}/api/compiler/{self.compiler_id}/compile"

    async def compile(
        self,
        source: str,
        arguments: Sequence[str] = (),
        execute: bool = False,
    ) -> CompileResult:
        """Run one compile round trip and return the parsed result."""
        request = CompileRequest(source, tuple(arguments), execute)
        try:
            response = await self._client.post(
                self.compile_url,
                json=request.to_json(),
                headers={"Accept": "application/json"},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            # InvalidURL is raised while building the request and is not an HTTPError.
            raise CompileTransportError(f"{type(exc).__name__}: {exc}") from exc

        if not response.is_success:
            body = " ".join(response.text.split())[:ERROR_BODY_PREVIEW_CHARS]
            raise CompileTransportError(
                f"HTTP {response.status_code} from {self.compile_url}: {body}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise CompileProtocolError("response body is not JSON") from exc
        result = parse_compile_response(payload)
        logger.debug(
            "compile finished: exit=%s asm=%d stdout=%d stderr=%d",
            result.exit_code,
            len(result.assembly),
            len(result.stdout),
            len(result.stderr),
        )
        return result

    async def aclose(self) -> None:
        await self._client.aclose()
