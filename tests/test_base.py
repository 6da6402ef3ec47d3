import logging
import sys
import unittest
from pathlib import Path

# Ensure src/ is on sys.path so we can import the package without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from tagedit.resources.base import Resource  # noqa: E402


class DummyClient:
    def __init__(self, response=None) -> None:
        self._logger = logging.getLogger("tagedit.tests")
        self.dataset = "production"
        self.response = {"ok": True} if response is None else response
        self.calls: list[tuple[str, str, object, object, object]] = []

    def request(self, method, path, params=None, json=None, timeout=None):
        self.calls.append((method, path, params, json, timeout))
        return self.response


class BaseResourceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = DummyClient()
        self.resource = Resource(self.client)  # type: ignore[arg-type]

    def test_logger_property(self):
        self.assertIs(self.resource._logger, self.client._logger)

    def test_request_passthrough(self):
        result = self.resource._request("GET", "/x", params={"a": 1}, json={"b": 2}, timeout=5)
        self.assertEqual(result, {"ok": True})
        self.assertEqual(self.client.calls[-1], ("GET", "/x", {"a": 1}, {"b": 2}, 5))

    def test_get(self):
        self.resource._get("/g", params={"q": 1}, timeout=2)
        self.assertEqual(self.client.calls[-1], ("GET", "/g", {"q": 1}, None, 2))

    def test_post(self):
        self.resource._post("/p", params={"r": "1"}, json={"x": 1}, timeout=3)
        self.assertEqual(self.client.calls[-1], ("POST", "/p", {"r": "1"}, {"x": 1}, 3))

    def test_query_encodes_variables(self):
        self.client.response = {"result": [1]}
        result = self.resource._query("*[name == $name]", {"name": "draft"})
        self.assertEqual(result, [1])
        method, path, params, _json, _timeout = self.client.calls[-1]
        self.assertEqual(method, "GET")
        self.assertEqual(path, "/data/query/production")
        self.assertEqual(params, {"query": "*[name == $name]", "$name": '"draft"'})

    def test_query_non_dict_response(self):
        self.client.response = []
        self.assertIsNone(self.resource._query("*"))

    def test_mutate(self):
        self.resource._mutate([{"delete": {"id": "t1"}}])
        self.assertEqual(
            self.client.calls[-1],
            ("POST", "/data/mutate/production", None, {"mutations": [{"delete": {"id": "t1"}}]}, None),
        )

    def test_mutate_return_documents(self):
        self.resource._mutate([], return_documents=True)
        self.assertEqual(self.client.calls[-1][2], {"returnDocuments": "true"})
