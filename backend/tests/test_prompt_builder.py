from parche_ai.services.models import ConversationTurn, PlanRecord
from parche_ai.services.prompt_builder import build_messages, build_system_prompt, distinct_categories, plan_line


def test_system_prompt_lists_catalog(catalog):
    prompt = build_system_prompt(catalog, "Medellín", max_plans=3)
    assert "plans, places, and experiences in Medellín" in prompt
    assert "ID: plan_poblado_1 | Name: Rooftop Sunset | Category: Rooftop" in prompt
    assert "Offer maximum 3 recommendations per message" in prompt
    assert "Available categories: Rooftop, Romántico" in prompt


def test_system_prompt_with_empty_catalog():
    prompt = build_system_prompt([], "Bogotá")
    assert "(no plans available)" in prompt
    assert "Available categories: none" in prompt


def test_plan_line_truncates_description():
    plan = PlanRecord(id="p", name="X", category="Y", description="d" * 200)
    line = plan_line(plan)
    assert "d" * 150 + "..." in line
    assert "d" * 151 not in line
    assert line.endswith("Rating: n/a")


def test_distinct_categories_keep_first_seen_order():
    plans = [
        PlanRecord(id="1", name="a", category="Cultura"),
        PlanRecord(id="2", name="b", category="Bar"),
        PlanRecord(id="3", name="c", category="Cultura"),
        PlanRecord(id="4", name="d"),
    ]
    assert distinct_categories(plans) == ["Cultura", "Bar"]


def test_build_messages_order():
    history = [
        ConversationTurn(role="user", content="hola"),
        ConversationTurn(role="assistant", content="¿Qué buscas?"),
    ]
    messages = build_messages("quiero rumba", history, "SYSTEM")
    assert messages == [
        {"role": "system", "content": "SYSTEM"},
        {"role": "user", "content": "hola"},
        {"role": "assistant", "content": "¿Qué buscas?"},
        {"role": "user", "content": "quiero rumba"},
    ]
