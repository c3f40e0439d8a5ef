"""
Claude API client for schema-constrained plan output.
"""

import json
import logging

import anthropic

from workout_planner.errors import ProviderError
from workout_planner.models import PLAN_JSON_SCHEMA

logger = logging.getLogger(__name__)

PLAN_TOOL_NAME = "submit_workout_plan"

PLAN_TOOL = {
    "name": PLAN_TOOL_NAME,
    "description": "Submit the complete workout plan as a single JSON object.",
    "input_schema": PLAN_JSON_SCHEMA,
}


class AnthropicPlanClient:
    """Sends one prompt pair to Claude and returns the plan JSON text."""

    def __init__(self, api_key, config, model=None, max_tokens=None, timeout=None):
        """
        Initialize the client.

        Args:
            api_key: Anthropic API key
            config: Full configuration dictionary
            model: Claude model to use (defaults to config value)
            max_tokens: Maximum tokens for response (defaults to config value)
            timeout: Client timeout in seconds (defaults to config value)
        """
        claude = config["claude"]
        self.client = anthropic.Anthropic(
            api_key=api_key,
            timeout=timeout or claude.get("timeout", 120),
            max_retries=claude.get("max_retries", 2),
        )
        self.model = model or claude["model"]
        self.max_tokens = max_tokens or claude["max_tokens"]

    def complete(self, system, user, temperature, max_tokens=None):
        """
        Request a plan constrained to the plan schema.

        Returns:
            Raw response text (the tool input serialised as JSON, or the
            model's text blocks if it answered without the tool)

        Raises:
            ProviderError: on timeout, rate limiting or any API failure
        """
        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens or self.max_tokens,
                temperature=temperature,
                system=system,
                tools=[PLAN_TOOL],
                tool_choice={"type": "tool", "name": PLAN_TOOL_NAME},
                messages=[{"role": "user", "content": user}],
            )
        except anthropic.APITimeoutError as exc:
            raise ProviderError(
                "The AI service took too long to respond. Please try again.",
                code="TIMEOUT_ERROR",
            ) from exc
        except anthropic.RateLimitError as exc:
            raise ProviderError(
                "The AI service is busy right now. Please wait a minute and try again.",
                code="RATE_LIMITED",
            ) from exc
        except anthropic.APIError as exc:
            raise ProviderError(details={"error": str(exc)}) from exc

        logger.debug("Claude stop_reason=%s", getattr(message, "stop_reason", None))

        for block in message.content:
            if getattr(block, "type", None) == "tool_use" and block.name == PLAN_TOOL_NAME:
                return json.dumps(block.input)

        return "".join(
            getattr(block, "text", "") for block in message.content if getattr(block, "type", None) == "text"
        )
