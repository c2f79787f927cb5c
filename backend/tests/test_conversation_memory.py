from parche_ai.services.conversation_memory import has_greeted_before, last_assistant_category, recent_turns
from parche_ai.services.models import ConversationTurn, Intent


def _turns(n):
    return [
        ConversationTurn(role="user" if i % 2 == 0 else "assistant", content=f"mensaje {i}")
        for i in range(n)
    ]


def test_recent_turns_keeps_last_window_in_order():
    history = _turns(14)
    window = recent_turns(history, 10)
    assert len(window) == 10
    assert window[0].content == "mensaje 4"
    assert window[-1].content == "mensaje 13"


def test_recent_turns_short_and_empty_history():
    assert recent_turns(_turns(3), 10) == _turns(3)
    assert recent_turns([], 10) == []
    assert recent_turns(None, 10) == []
    assert recent_turns(_turns(3), 0) == []


def test_recent_turns_does_not_mutate():
    history = _turns(12)
    recent_turns(history, 5)
    assert len(history) == 12


def test_has_greeted_before(greeted_history):
    assert has_greeted_before(greeted_history)
    assert not has_greeted_before(_turns(4))
    assert not has_greeted_before(None)
    assert has_greeted_before([ConversationTurn(role="user", content="Hey, ¿qué tal?")])


def test_last_assistant_category(romantic_history):
    assert last_assistant_category(romantic_history) == Intent.ROMANTIC


def test_last_assistant_category_uses_most_recent_reply(romantic_history):
    history = romantic_history + [
        ConversationTurn(role="user", content="algo más movido"),
        ConversationTurn(role="assistant", content="Para la rumba, estos planes suenan:"),
    ]
    assert last_assistant_category(history) == Intent.NIGHTLIFE


def test_last_assistant_category_none():
    assert last_assistant_category([]) is None
    assert last_assistant_category([ConversationTurn(role="user", content="romántico")]) is None
    assert last_assistant_category(
        [ConversationTurn(role="assistant", content="Basándome en lo que dices, te recomiendo:")]
    ) is None
