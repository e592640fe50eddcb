import pytest

from allersafe.core.errors import InvalidInput
from allersafe.core.guidance import AI_NOTE_HEADER
from allersafe.services.chat_service import ChatAssistant, classify_intent
from conftest import FailingProvider, StaticProvider


@pytest.mark.parametrize("message,intent", [
    ("I think I'm having a severe reaction", "emergency"),
    ("Which doctor should I see?", "specialist"),
    ("Is this food okay for me?", "food_safety"),
    ("What are common allergy symptoms?", "allergy"),
    ("Hello there", "default"),
])
def test_classify_intent(message, intent):
    assert classify_intent(message) == intent


def test_emergency_wins_over_other_keywords():
    assert classify_intent("Emergency: allergic reaction to food") == "emergency"


def test_reply_is_personalised(make_enrichment):
    assistant = ChatAssistant(make_enrichment())
    reply = assistant.respond("hi", allergies=["nuts", "milk"], name="Alex")

    assert reply.success is True
    assert reply.ai_powered is False
    assert reply.response.startswith("Hello Alex!")
    assert "nuts, milk" in reply.response


def test_reply_without_profile(make_enrichment):
    reply = ChatAssistant(make_enrichment()).respond("What are allergy symptoms?")
    assert "Based on your profile, here are my recommendations" in reply.response


@pytest.mark.parametrize("message", [None, "", "   "])
def test_empty_message_rejected(make_enrichment, message):
    with pytest.raises(InvalidInput):
        ChatAssistant(make_enrichment()).respond(message)


def test_enrichment_is_appended_after_reply(make_enrichment):
    plain = ChatAssistant(make_enrichment()).respond("Which doctor should I see?", allergies=["milk"])
    enriched = ChatAssistant(
        make_enrichment(FailingProvider(), StaticProvider("See a board-certified allergist."))
    ).respond("Which doctor should I see?", allergies=["milk"])

    assert enriched.ai_powered is True
    assert enriched.response.startswith(plain.response)
    assert enriched.response.endswith(f"{AI_NOTE_HEADER}\nSee a board-certified allergist.")
