import random

import pytest

from parche_ai.services.local_engine import LocalEngine, typing_delay
from parche_ai.services.models import ConversationTurn, Intent, PlanRecord
from parche_ai.services.vocabulary import (
    CLARIFICATION_REPLY,
    NO_PLANS_REPLY,
    REPEAT_GREETING_REPLY,
    WELCOME_REPLY,
)


@pytest.fixture()
def engine():
    return LocalEngine(rng=random.Random(11))


def test_first_greeting_gets_welcome(engine, catalog):
    response = engine.respond("Hola", [], catalog)
    assert response.content == WELCOME_REPLY
    assert response.plan_references == []
    assert response.confidence_score == 0.8


def test_repeat_greeting_is_terse(engine, catalog, greeted_history):
    response = engine.respond("hola", greeted_history, catalog)
    assert response.content == REPEAT_GREETING_REPLY
    assert response.plan_references == []


def test_zero_window_ignores_history(catalog, greeted_history):
    engine = LocalEngine(rng=random.Random(1), history_window=0)
    assert engine.history_window == 0
    assert engine.respond("Hola", greeted_history, catalog).content == WELCOME_REPLY


def test_greeting_outside_window_is_forgotten(catalog):
    engine = LocalEngine(rng=random.Random(1), history_window=10)
    history = [ConversationTurn(role="user", content="hola")] + [
        ConversationTurn(role="user" if i % 2 else "assistant", content=f"mensaje {i}")
        for i in range(12)
    ]
    assert engine.respond("Hola", history, catalog).content == WELCOME_REPLY


def test_too_short_asks_for_more(engine, catalog):
    response = engine.respond("ns", [], catalog)
    assert response.content.startswith("Necesito un poco más de info")
    assert response.content == CLARIFICATION_REPLY
    assert response.plan_references == []
    assert response.confidence_score == 0.8


def test_romantic_recommendation(engine, rooftop):
    other = PlanRecord(id="plan_x", name="Ciclovía", category="Deporte", rating=3.9)
    response = engine.respond("quiero algo romántico", [], [rooftop, other])
    assert "**Rooftop Sunset**" in response.content
    assert "**Ciclovía**" not in response.content
    assert response.content.endswith("¿Cuál te llama más?")
    assert [(r.plan_id, r.confidence) for r in response.plan_references] == [("plan_poblado_1", 0.95)]
    assert response.confidence_score == 0.7
    assert 0.5 <= response.typing_delay_seconds <= 1.5


def test_every_recommended_plan_is_referenced(engine, catalog):
    reply = engine.generate_reply("quiero ir a un museo", [], catalog)
    response = engine.respond("quiero ir a un museo", [], catalog)
    assert reply.intent == Intent.CULTURE
    assert len(reply.plans) == 3
    assert len(response.plan_references) == 3


def test_rejection_changes_category(engine, catalog, romantic_history):
    reply = engine.generate_reply("Nope", romantic_history, catalog)
    assert reply.intent == Intent.REJECTION
    assert reply.avoided == Intent.ROMANTIC
    assert reply.text.startswith("Entiendo, cambiemos de tema. Te propongo esto:")
    assert 1 <= len(reply.plans) <= 3


def test_empty_catalog(engine):
    response = engine.respond("quiero algo romántico", [], [])
    assert response.content == NO_PLANS_REPLY
    assert response.plan_references == []


def test_none_catalog_raises(engine):
    with pytest.raises(ValueError):
        engine.respond("Hola", [], None)


def test_generic_request_uses_default_copy(engine, catalog):
    reply = engine.generate_reply("quiero hacer algo diferente hoy", [], catalog)
    assert reply.intent == Intent.NONE
    assert reply.text.startswith("Basándome en lo que dices, te recomiendo:")
    assert reply.text.endswith("¿Cuál te llama la atención?")


def test_typing_delay_range():
    rng = random.Random(0)
    for _ in range(100):
        assert 0.5 <= typing_delay(rng) <= 1.5


def test_response_uses_camel_case_aliases(engine, catalog):
    payload = engine.respond("Hola", [], catalog).model_dump(by_alias=True)
    assert set(payload) == {"content", "planReferences", "typingDelaySeconds", "confidenceScore"}
