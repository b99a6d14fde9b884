"""OpenAI adapter for the strategist chat."""

import logging

from src.adapters.strategist._prompt import build_system_prompt, conversation_messages, parse_reply
from src.domain.model import Theme
from src.domain.phase import DEFAULT_THRESHOLDS, PhaseThresholds
from src.domain.ports import StrategistPort, StrategistReply

logger = logging.getLogger("music_league.strategist.openai")


class OpenAIStrategistAdapter(StrategistPort):

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 90.0,
        thresholds: PhaseThresholds = DEFAULT_THRESHOLDS,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.thresholds = thresholds

    def respond(self, theme: Theme, message: str) -> StrategistReply:
        from openai import OpenAI
        client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": build_system_prompt(theme, self.thresholds)},
                    *conversation_messages(theme, message),
                ],
                max_tokens=4096,
            )
        except Exception:
            logger.exception("OpenAI request failed")
            raise
        return parse_reply(response.choices[0].message.content or "")
