"""Anthropic adapter for the strategist chat."""

import logging
import time

from src.adapters.strategist._prompt import build_system_prompt, conversation_messages, parse_reply
from src.domain.model import Theme
from src.domain.phase import DEFAULT_THRESHOLDS, PhaseThresholds
from src.domain.ports import StrategistPort, StrategistReply

logger = logging.getLogger("music_league.strategist.anthropic")


class AnthropicStrategistAdapter(StrategistPort):

    def __init__(
        self,
        api_key: str,
        model: str = "claude-3-5-haiku-latest",
        timeout: float = 90.0,
        thresholds: PhaseThresholds = DEFAULT_THRESHOLDS,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.thresholds = thresholds

    def respond(self, theme: Theme, message: str) -> StrategistReply:
        messages = conversation_messages(theme, message)
        started_at = time.perf_counter()
        logger.info(
            "Anthropic request started (model=%s, theme=%s, history=%s, timeout=%.0fs)",
            self.model,
            theme.id,
            len(messages) - 1,
            self.timeout,
        )

        import anthropic
        client = anthropic.Anthropic(api_key=self.api_key, timeout=self.timeout)
        try:
            response = client.messages.create(
                model=self.model,
                max_tokens=4096,
                system=build_system_prompt(theme, self.thresholds),
                messages=messages,
            )
        except Exception:
            logger.exception("Anthropic request failed")
            raise

        reply = parse_reply(response.content[0].text)
        logger.info(
            "Anthropic request completed (duration=%.1fs, candidates=%s, tier_actions=%s)",
            time.perf_counter() - started_at,
            len(reply.candidates),
            len(reply.tier_actions),
        )
        return reply
