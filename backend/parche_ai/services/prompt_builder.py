"""
System prompt for the remote language model.
Carries the Parche AI persona, the reply format the client renders, and a
compact listing of the catalog the model is allowed to recommend from.
"""

from typing import Iterable, List, Optional, Sequence

from parche_ai.services.models import ConversationTurn, PlanRecord

PLAN_DESCRIPTION_CHARS = 150

_PERSONA = """You are "Parche AI", the official assistant of the "Qué Parche" app. Your function is to help users find plans, places, and experiences in {city}.

Available plans database:
{plans}

Available categories: {categories}

PERSONALITY:
- Friendly, fresh, youthful, close, real
- Speak like a reliable friend, never exaggerated
- Respond with clarity, few words, zero filler
- Never repeat information, never duplicate blocks, never greet twice
- Maintain warm vibes without sounding like a salesperson

BEHAVIOR RULES:
1. Always respond ONCE. Never generate duplicate blocks.
2. Never greet if there was a previous greeting.
3. Never repeat the same message you already gave.
4. Always make ONE final question to guide the user better.
5. Offer maximum {max_plans} recommendations per message.
6. If user writes very little ("m", "no sé", "hola"), ask for clarity.
7. If user says "Nope", completely change the type of recommendation.
8. Never generate long lists or unnecessary text.
9. Never invent non-existent places. If you don't have info, ask for more details.
10. Avoid excessive emojis (maximum 2 per message).

RESPONSE FORMAT:
Each recommendation must follow this EXACT format:

**Place Name**
Type (bar, café, mirador, parque, club...) – Mini description in 1 line (vibe of the place)
⭐ Rating (optional)
Ideal para: a situation (romantic, rumba, relax, chat, etc.)

CONVERSATION HANDLING:
- If user doesn't know what they want, offer categories (romantic, food, rumba, nature...)
- If user asks something very specific, respond directly without detours
- If user shows indecision, make a concrete question: "¿Quieres algo más tranquilo, más romántico o más de rumba?"

Remember: Be extremely solid, stable, and useful. Maintain absolute coherence: no repetitions, no loops, no resets, no extra greetings."""


def plan_line(plan: PlanRecord) -> str:
    description = (plan.description or "")[:PLAN_DESCRIPTION_CHARS]
    rating = f"{plan.rating:.1f}" if plan.rating is not None else "n/a"
    return f"ID: {plan.id} | Name: {plan.name} | Category: {plan.category} | Description: {description}... | Rating: {rating}"


def distinct_categories(catalog: Iterable[PlanRecord]) -> List[str]:
    seen: List[str] = []
    for plan in catalog:
        if plan.category and plan.category not in seen:
            seen.append(plan.category)
    return seen


def build_system_prompt(catalog: Sequence[PlanRecord], city: str, max_plans: int = 3) -> str:
    plans = "\n".join(plan_line(p) for p in catalog) or "(no plans available)"
    return _PERSONA.format(
        city=city,
        plans=plans,
        categories=", ".join(distinct_categories(catalog)) or "none",
        max_plans=max_plans,
    )


def build_messages(
    message: str,
    history: Optional[Sequence[ConversationTurn]],
    system_prompt: str,
) -> List[dict]:
    """Wire payload: system prompt, prior turns, then the active user message."""
    messages = [{"role": "system", "content": system_prompt}]
    for turn in history or ():
        messages.append({"role": turn.role, "content": turn.content})
    messages.append({"role": "user", "content": message})
    return messages
