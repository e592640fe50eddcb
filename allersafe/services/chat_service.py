from datetime import datetime, timezone
from typing import Optional, Sequence

from allersafe.core.errors import InvalidInput
from allersafe.core.guidance import AI_NOTE_HEADER, CHAT_INTENTS, CHAT_RESPONSES
from allersafe.core.logging_config import get_logger
from allersafe.models import ChatResponse
from allersafe.services.enrichment import EnrichmentService, build_chat_prompt, enrichment_service

logger = get_logger(__name__)


def classify_intent(message: str) -> str:
    lowered = message.lower()
    for intent, keywords in CHAT_INTENTS:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return "default"


class ChatAssistant:
    def __init__(self, enrichment: EnrichmentService):
        self.enrichment = enrichment

    def respond(
        self,
        message: Optional[str],
        allergies: Sequence[str] = (),
        name: str = ""
    ) -> ChatResponse:
        """
        Answer a chat message with a fixed allergy-assistant reply.

        The reply is chosen by keyword and personalised with the profile.
        Enrichment text, when it arrives in time, is appended under a
        separate not-medical-advice header and never replaces the reply.
        """
        if not message or not message.strip():
            raise InvalidInput("INVALID_INPUT", "Message is required")

        allergies = [a for a in allergies if a]
        pending = self.enrichment.submit(build_chat_prompt(message.strip(), allergies))

        intent = classify_intent(message)
        response = self._render(intent, allergies, name)

        enrichment = self.enrichment.collect(pending)
        if enrichment:
            response = f"{response}\n\n{AI_NOTE_HEADER}\n{enrichment.text}"

        logger.info(f"Chat response generated: intent={intent} ai_powered={enrichment is not None}")
        return ChatResponse(
            response=response,
            ai_powered=enrichment is not None,
            timestamp=datetime.now(timezone.utc).isoformat()
        )

    def _render(self, intent: str, allergies: Sequence[str], name: str) -> str:
        joined = ", ".join(allergies)
        return CHAT_RESPONSES[intent].format(
            allergy_clause=f" showing allergies to: **{joined}**" if joined else "",
            allergy_question=(
                f"\n\nWould you like specific guidance for your known allergies: {joined}?" if joined else ""
            ),
            name_clause=f" {name}" if name else "",
            profile_line=(
                f"\nI see you have allergies to: **{joined}**. I'll tailor my advice to your profile.\n"
                if joined else ""
            ),
        )


chat_assistant = ChatAssistant(enrichment_service)
