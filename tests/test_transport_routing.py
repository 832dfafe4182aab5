import unittest
from unittest.mock import patch
from uuid import uuid4

from fastapi.testclient import TestClient

from firecrawlagent import main
from firecrawlagent.config import FirecrawlConfig
from firecrawlagent.router.transport_router import (
    TRANSPORT_DIRECT,
    TRANSPORT_NONE,
    TRANSPORT_SSE,
    TRANSPORT_SSE_MESSAGE,
    decide_transport,
)
from firecrawlagent.services import session as session_module
from firecrawlagent.services.session import SessionDirectory

MCP_HEADERS = {"Accept": "application/json, text/event-stream"}


def _call(name: str, arguments: dict, request_id: int = 1) -> dict:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {"name": name, "arguments": arguments},
    }


class DecideTransportTests(unittest.TestCase):
    def test_known_paths(self):
        self.assertEqual(decide_transport("/sse").transport, TRANSPORT_SSE)
        self.assertEqual(decide_transport("/sse/message").transport, TRANSPORT_SSE_MESSAGE)
        self.assertEqual(decide_transport("/mcp").transport, TRANSPORT_DIRECT)

    def test_paths_must_match_exactly(self):
        for path in ("/", "", "/health", "/sse/", "//mcp", "/mcp/", "/mcp/extra", "/ssex"):
            decision = decide_transport(path)
            self.assertEqual(decision.transport, TRANSPORT_NONE, path)
            self.assertFalse(decision.found)


class TransportRoutingTests(unittest.TestCase):
    def setUp(self):
        sessions_patch = patch.object(
            main, "sessions", SessionDirectory(FirecrawlConfig(api_key=None))
        )
        sessions_patch.start()
        self.addCleanup(sessions_patch.stop)
        self.client = TestClient(main.app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def _post_mcp(self, payload: dict):
        return self.client.post("/mcp", json=payload, headers=MCP_HEADERS)

    def test_unknown_path_returns_404_for_any_method(self):
        for method in ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"):
            response = self.client.request(method, "/nothing-here")
            self.assertEqual(response.status_code, 404, method)
        self.assertEqual(self.client.get("/docs").status_code, 404)
        self.assertEqual(self.client.head("/nothing-here").status_code, 404)

    def test_near_miss_paths_are_not_transports(self):
        self.assertEqual(self.client.post("/mcp/", json=_call("add", {"a": 1, "b": 1})).status_code, 404)
        self.assertEqual(self.client.get("/sse/").status_code, 404)

    def test_direct_transport_calls_tool(self):
        response = self._post_mcp(_call("add", {"a": 2, "b": 3}))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["id"], 1)
        self.assertEqual(body["result"]["content"], [{"type": "text", "text": "5"}])
        self.assertFalse(body["result"]["isError"])

    def test_direct_transport_returns_divide_by_zero_as_result(self):
        body = self._post_mcp(_call("calculate", {"operation": "divide", "a": 10, "b": 0})).json()
        self.assertNotIn("error", body)
        self.assertEqual(body["result"]["content"], [])
        self.assertEqual(
            body["result"]["error"],
            {"code": "invalid_argument", "message": "Cannot divide by zero"},
        )

    def test_invalid_arguments_are_reported_on_the_call(self):
        body = self._post_mcp(_call("add", {"a": "two", "b": 3}, request_id=7)).json()
        self.assertEqual(body["id"], 7)
        self.assertTrue(body["result"]["isError"])
        error = body["result"]["structuredContent"]["error"]
        self.assertEqual(error["type"], "invalid_argument")
        self.assertEqual(error["field"], "a")

    def test_unknown_tool_is_reported(self):
        body = self._post_mcp(_call("divide", {})).json()
        self.assertTrue(body["result"]["isError"])
        self.assertEqual(body["result"]["structuredContent"]["error"]["type"], "unknown_tool")

    def test_search_without_credential_is_configuration_error(self):
        body = self._post_mcp(_call("firecrawl_search", {"query": "x"})).json()
        self.assertTrue(body["result"]["isError"])
        self.assertEqual(
            body["result"]["structuredContent"]["error"]["type"], "configuration_error"
        )
        self.assertIn("FIRECRAWL_API_KEY", body["result"]["content"][0]["text"])

    def test_list_tools(self):
        body = self._post_mcp({"jsonrpc": "2.0", "id": 2, "method": "tools/list"}).json()
        self.assertEqual(
            [tool["name"] for tool in body["result"]["tools"]],
            ["add", "calculate", "firecrawl_scrape", "firecrawl_search"],
        )

    def test_sse_message_requires_open_channel(self):
        missing = self.client.post("/sse/message", json=_call("add", {"a": 1, "b": 1}))
        self.assertEqual(missing.status_code, 400)
        unknown = self.client.post(
            f"/sse/message?session_id={uuid4().hex}", json=_call("add", {"a": 1, "b": 1})
        )
        self.assertEqual(unknown.status_code, 404)

    def test_stream_paths_reject_wrong_methods(self):
        self.assertEqual(self.client.put("/sse").status_code, 405)
        self.assertEqual(self.client.get("/sse/message").status_code, 405)

    def test_state_is_shared_across_transports(self):
        self.assertIs(main.transports.server, main.mcp_server)
        with patch.object(
            session_module,
            "_build_tool_descriptors",
            wraps=session_module._build_tool_descriptors,
        ) as build:
            self._post_mcp(_call("add", {"a": 1, "b": 1}))
            self.assertTrue(main.shared_session().initialized)
            second = self._post_mcp(_call("add", {"a": 2, "b": 2})).json()
        self.assertEqual(second["result"]["content"][0]["text"], "4")
        build.assert_called_once()
        self.assertIs(main.shared_session(), main.sessions.get(main.settings.session_name))


if __name__ == "__main__":
    unittest.main()
