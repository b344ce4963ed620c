"""Compile client request/response mapping and error classification."""

from __future__ import annotations

import json
import unittest

import httpx

from cewatch.compiler import (
    AsmLine,
    CompileRequest,
    CompilerExplorerClient,
    SourceRef,
    SourceTag,
    StreamLine,
    parse_compile_response,
)
from cewatch.errors import CompileProtocolError, CompileTransportError


def _client_for(handler) -> CompilerExplorerClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CompilerExplorerClient("https://ce.example.com/", "g132", http_client=http_client)


class CompileRequestTests(unittest.TestCase):
    def test_request_body_joins_user_arguments(self) -> None:
        body = CompileRequest("int main(){}", ("-O2", "-std=c++20"), execute=True).to_json()

        self.assertEqual(body["source"], "int main(){}")
        self.assertEqual(body["options"]["userArguments"], "-O2 -std=c++20")
        self.assertTrue(body["options"]["filters"]["execute"])
        self.assertTrue(body["allowStoreCodeDebug"])


class ParseCompileResponseTests(unittest.TestCase):
    def test_maps_streams_assembly_and_execution(self) -> None:
        result = parse_compile_response(
            {
                "code": 1,
                "stdout": [],
                "stderr": [
                    {"text": "<source>:3:5: error: expected ';'", "tag": {"line": 3, "column": 5, "text": "error"}},
                    {"text": "1 error generated."},
                ],
                "asm": [
                    {"text": "main:", "source": None},
                    {"text": "        ret", "source": {"file": None, "line": 1}},
                ],
                "execResult": {"didExecute": True, "code": 3, "stdout": [{"text": "hi"}], "stderr": []},
            }
        )

        self.assertEqual(result.exit_code, 1)
        self.assertEqual(result.stderr[0], StreamLine("<source>:3:5: error: expected ';'", SourceTag(3, "error")))
        self.assertIsNone(result.stderr[1].source_tag)
        self.assertEqual(result.assembly, (AsmLine("main:"), AsmLine("        ret", SourceRef(None, 1))))
        self.assertIsNotNone(result.execution)
        self.assertEqual(result.execution.exit_code, 3)
        self.assertEqual(result.execution.stdout, (StreamLine("hi"),))

    def test_execution_that_did_not_run_is_omitted(self) -> None:
        result = parse_compile_response({"code": 0, "execResult": {"didExecute": False, "code": -1}})
        self.assertIsNone(result.execution)
        self.assertEqual(result.assembly, ())

    def test_wrong_shapes_raise_protocol_error(self) -> None:
        for payload in ([], {"stdout": []}, {"code": "0"}, {"code": 0, "asm": {}}, {"code": 0, "stderr": [{}]}):
            with self.subTest(payload=payload):
                with self.assertRaises(CompileProtocolError):
                    parse_compile_response(payload)


class CompilerExplorerClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_posts_to_compiler_endpoint_and_parses_result(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"code": 0, "asm": [{"text": "main: ret"}]})

        client = _client_for(handler)
        try:
            result = await client.compile("int main(){return 0;}", ["-O1"], execute=False)
        finally:
            await client.aclose()

        self.assertEqual(str(seen[0].url), "https://ce.example.com/api/compiler/g132/compile")
        self.assertEqual(seen[0].headers["accept"], "application/json")
        body = json.loads(seen[0].content)
        self.assertEqual(body["options"]["userArguments"], "-O1")
        self.assertFalse(body["options"]["filters"]["execute"])
        self.assertEqual(result.assembly, (AsmLine("main: ret"),))

    async def test_http_error_status_is_transport_failure(self) -> None:
        client = _client_for(lambda request: httpx.Response(404, text="Compiler not found"))
        try:
            with self.assertRaises(CompileTransportError) as ctx:
                await client.compile("x")
        finally:
            await client.aclose()

        self.assertEqual(ctx.exception.status_code, 404)
        self.assertIn("Compiler not found", str(ctx.exception))

    async def test_connection_error_is_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client_for(handler)
        try:
            with self.assertRaises(CompileTransportError):
                await client.compile("x")
        finally:
            await client.aclose()

    async def test_malformed_service_url_is_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("request should not be sent")

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client = CompilerExplorerClient("http://[::1", "g132", http_client=http_client)
        try:
            with self.assertRaises(CompileTransportError) as ctx:
                await client.compile("int main() {}")
        finally:
            await client.aclose()

        self.assertIsNone(ctx.exception.status_code)
        self.assertTrue(ctx.exception.status_text().startswith("compile request failed: InvalidURL"))

    async def test_non_json_body_is_protocol_failure(self) -> None:
        client = _client_for(lambda request: httpx.Response(200, text="<html>oops</html>"))
        try:
            with self.assertRaises(CompileProtocolError):
                await client.compile("x")
        finally:
            await client.aclose()


if __name__ == "__main__":
    unittest.main()
