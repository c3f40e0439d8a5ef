import json
import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock

import anthropic
import httpx

from workout_planner.config import default_config
from workout_planner.errors import ProviderError
from workout_planner.llm_client import PLAN_TOOL_NAME, AnthropicPlanClient


def make_client():
    client = AnthropicPlanClient(api_key="test-key", config=default_config())
    client.client = MagicMock()
    return client


def make_request():
    return httpx.Request("POST", "https://api.anthropic.com/v1/messages")


class CompleteTests(unittest.TestCase):
    def test_returns_tool_input_as_json(self):
        client = make_client()
        plan = {"planName": "Test Plan"}
        client.client.messages.create.return_value = SimpleNamespace(
            stop_reason="tool_use",
            content=[SimpleNamespace(type="tool_use", name=PLAN_TOOL_NAME, input=plan)],
        )

        self.assertEqual(json.loads(client.complete("system", "user", 0.3)), plan)

    def test_falls_back_to_text_blocks(self):
        client = make_client()
        client.client.messages.create.return_value = SimpleNamespace(
            stop_reason="end_turn",
            content=[SimpleNamespace(type="text", text='{"planName": '), SimpleNamespace(type="text", text='"X"}')],
        )

        self.assertEqual(client.complete("system", "user", 0.3), '{"planName": "X"}')

    def test_request_arguments(self):
        client = make_client()
        client.client.messages.create.return_value = SimpleNamespace(stop_reason="end_turn", content=[])

        client.complete("sys", "hello", 0.2, max_tokens=123)

        kwargs = client.client.messages.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "claude-sonnet-4-5")
        self.assertEqual(kwargs["max_tokens"], 123)
        self.assertEqual(kwargs["temperature"], 0.2)
        self.assertEqual(kwargs["system"], "sys")
        self.assertEqual(kwargs["messages"], [{"role": "user", "content": "hello"}])
        self.assertEqual(kwargs["tool_choice"], {"type": "tool", "name": PLAN_TOOL_NAME})
        self.assertEqual(kwargs["tools"][0]["name"], PLAN_TOOL_NAME)

    def test_default_max_tokens_from_config(self):
        client = make_client()
        client.client.messages.create.return_value = SimpleNamespace(stop_reason="end_turn", content=[])
        client.complete("sys", "hello", 0.3)
        self.assertEqual(client.client.messages.create.call_args.kwargs["max_tokens"], 8000)


class ErrorMappingTests(unittest.TestCase):
    def assert_maps_to(self, exc, code, action):
        client = make_client()
        client.client.messages.create.side_effect = exc
        with self.assertRaises(ProviderError) as ctx:
            client.complete("system", "user", 0.3)
        self.assertEqual(ctx.exception.code, code)
        self.assertEqual(ctx.exception.suggested_action, action)
        self.assertIs(ctx.exception.__cause__, exc)

    def test_timeout(self):
        self.assert_maps_to(anthropic.APITimeoutError(request=make_request()), "TIMEOUT_ERROR", "retry")

    def test_rate_limit(self):
        request = make_request()
        exc = anthropic.RateLimitError(
            "rate limited", response=httpx.Response(429, request=request), body=None
        )
        self.assert_maps_to(exc, "RATE_LIMITED", "wait")

    def test_connection_error(self):
        self.assert_maps_to(anthropic.APIConnectionError(request=make_request()), "AI_ERROR", "wait")


if __name__ == "__main__":
    unittest.main()
