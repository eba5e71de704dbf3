from __future__ import annotations

import json
import sys
import unittest

from gleamplate import __version__
from gleamplate.errors import ServiceError
from gleamplate.renderer import render
from gleamplate.serialization import nodes_from_list
from gleamplate.service import capabilities_request, check_request, dispatch, render_request, safe_dispatch


NODES = [
    {"kind": "import", "details": "gleam/int"},
    {"kind": "with", "name": "name", "type_name": "String", "span": {"line": 1, "column": 9}},
    {"kind": "text", "text": "Hello "},
    {"kind": "identifier", "name": "name"},
]


class ServiceTests(unittest.TestCase):
    def test_render_request(self) -> None:
        result = render_request({"nodes": NODES})
        self.assertEqual(result["target"], "gleam")
        self.assertIn("pub fn render(name name: String) -> String {", result["code"])
        self.assertEqual(result["metrics"], {"nodes": 4, "params": 1, "imports": 1})

    def test_render_request_from_json_text(self) -> None:
        result = render_request({"nodes_json": json.dumps(NODES)})
        self.assertIn("import gleam/int", result["code"])

    def test_check_request_lists_params(self) -> None:
        result = check_request({"nodes": NODES})
        self.assertTrue(result["ok"])
        self.assertEqual(result["params"], [{"name": "name", "type_name": "String"}])
        self.assertEqual(result["imports"], ["gleam/int"])

    def test_capabilities_request(self) -> None:
        caps = capabilities_request({})
        self.assertEqual(caps["version"], __version__)
        self.assertEqual(caps["methods"], ["capabilities", "check", "render"])
        self.assertEqual(caps["targets"], ["gleam"])

    def test_unknown_method(self) -> None:
        with self.assertRaises(ServiceError) as ctx:
            dispatch("compile", {})
        self.assertEqual(ctx.exception.code, "SRV001")

    def test_missing_nodes(self) -> None:
        with self.assertRaises(ServiceError) as ctx:
            dispatch("render", {})
        self.assertEqual(ctx.exception.code, "SRV003")

    def test_both_node_inputs_rejected(self) -> None:
        with self.assertRaises(ServiceError) as ctx:
            dispatch("render", {"nodes": NODES, "nodes_json": "[]"})
        self.assertEqual(ctx.exception.code, "SRV002")

    def test_safe_dispatch_reports_duplicate_param(self) -> None:
        nodes = NODES + [{"kind": "with", "name": "name", "type_name": "Int", "span": {"line": 3, "column": 9}}]
        ok, payload = safe_dispatch("render", {"nodes": nodes})
        self.assertFalse(ok)
        self.assertEqual(payload["error"]["code"], "RND001")
        self.assertEqual(payload["error"]["span"]["line"], 3)
        self.assertEqual(payload["error"]["details"], {"name": "name"})

    def test_non_object_payload_rejected(self) -> None:
        with self.assertRaises(ServiceError) as ctx:
            dispatch("render", ["not", "a", "dict"])
        self.assertEqual(ctx.exception.code, "SRV004")

    def test_safe_dispatch_reports_non_object_payload(self) -> None:
        ok, payload = safe_dispatch("render", ["not", "a", "dict"])
        self.assertFalse(ok)
        self.assertEqual(payload["error"]["code"], "SRV004")

    def test_safe_dispatch_reports_unexpected_failure(self) -> None:
        node = {"kind": "text", "text": "leaf"}
        for _ in range(sys.getrecursionlimit() * 2):
            node = {"kind": "if", "condition": "c", "then_nodes": [node]}
        ok, payload = safe_dispatch("render", {"nodes": [node]})
        self.assertFalse(ok)
        self.assertEqual(payload["error"]["code"], "SRV999")
        self.assertIn("RecursionError", payload["error"]["message"])

    def test_render_request_matches_render(self) -> None:
        code = render_request({"nodes": NODES})["code"]
        self.assertEqual(code, render(nodes_from_list(NODES)))

    def test_safe_dispatch_success(self) -> None:
        ok, payload = safe_dispatch("check", {"nodes": NODES})
        self.assertTrue(ok)
        self.assertTrue(payload["ok"])


if __name__ == "__main__":
    unittest.main()
