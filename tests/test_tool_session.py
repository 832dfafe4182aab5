import asyncio
import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from firecrawlagent.config import FirecrawlConfig
from firecrawlagent.errors import ConfigurationError
from firecrawlagent.services import session as session_module
from firecrawlagent.services.session import SessionDirectory, ToolSession

EXPECTED_TOOLS = ["add", "calculate", "firecrawl_scrape", "firecrawl_search"]


class ToolSessionTests(unittest.IsolatedAsyncioTestCase):
    def _session(self, api_key: str | None = None) -> ToolSession:
        return ToolSession(name="test", firecrawl=FirecrawlConfig(api_key=api_key))

    def test_constructs_without_credential(self):
        session = self._session()
        self.assertFalse(session.initialized)
        self.assertFalse(session.firecrawl_client.is_configured)
        self.assertEqual(len(session.registry), 0)

    async def test_initialization_is_idempotent(self):
        session = self._session()
        await session.ensure_initialized()
        first_registry = session.registry
        await session.ensure_initialized()
        self.assertTrue(session.initialized)
        self.assertIs(session.registry, first_registry)
        self.assertEqual([d.name for d in session.registry.list_tools()], EXPECTED_TOOLS)

    async def test_concurrent_initialization_registers_each_tool_once(self):
        session = self._session()
        with patch.object(
            session_module,
            "_build_tool_descriptors",
            wraps=session_module._build_tool_descriptors,
        ) as build:
            await asyncio.gather(*(session.ensure_initialized() for _ in range(25)))
        build.assert_called_once()
        self.assertEqual([d.name for d in session.registry.list_tools()], EXPECTED_TOOLS)

    def test_initialization_from_many_threads_registers_each_tool_once(self):
        session = self._session()
        with patch.object(
            session_module,
            "_build_tool_descriptors",
            wraps=session_module._build_tool_descriptors,
        ) as build:
            with ThreadPoolExecutor(max_workers=8) as pool:
                list(pool.map(lambda _: asyncio.run(session.ensure_initialized()), range(16)))
        build.assert_called_once()
        self.assertEqual(len(session.registry), len(EXPECTED_TOOLS))

    async def test_call_tool_initializes_on_first_use(self):
        session = self._session()
        result = await session.call_tool("add", {"a": 2, "b": 3})
        self.assertTrue(session.initialized)
        self.assertEqual(result.content[0].text, "5")

    async def test_arithmetic_works_without_credential_but_search_does_not(self):
        session = self._session()
        result = await session.call_tool("calculate", {"operation": "multiply", "a": 4, "b": 2})
        self.assertEqual(result.content[0].text, "8")
        with self.assertRaises(ConfigurationError):
            await session.call_tool("firecrawl_search", {"query": "python"})

    async def test_list_tools_describes_schemas(self):
        tools = await self._session().list_tools()
        self.assertEqual([tool["name"] for tool in tools], EXPECTED_TOOLS)
        scrape = tools[2]
        self.assertEqual(scrape["inputSchema"]["properties"]["url"]["format"], "uri")


class SessionDirectoryTests(unittest.TestCase):
    def test_same_name_resolves_to_same_session(self):
        directory = SessionDirectory(FirecrawlConfig(api_key=None))
        self.assertIs(directory.get("shared-instance"), directory.get("shared-instance"))
        self.assertIsNot(directory.get("shared-instance"), directory.get("other"))

    def test_concurrent_lookup_creates_one_session(self):
        directory = SessionDirectory(FirecrawlConfig(api_key=None))
        with ThreadPoolExecutor(max_workers=8) as pool:
            sessions = list(pool.map(lambda _: directory.get("shared-instance"), range(32)))
        self.assertEqual(len({id(session) for session in sessions}), 1)


if __name__ == "__main__":
    unittest.main()
