import os
import random

# Must be set before parche_ai.core.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["REMOTE_COMPLETION_URL"] = ""
os.environ["SEED_CATALOG_ON_STARTUP"] = "false"

import pytest

from parche_ai.core.config import settings
from parche_ai.services.catalog import load_seed_catalog
from parche_ai.services.models import ConversationTurn, PlanRecord


@pytest.fixture(scope="session")
def seed_plans():
    return load_seed_catalog(settings.catalog_seed_path)


@pytest.fixture()
def catalog(seed_plans):
    return list(seed_plans)


@pytest.fixture()
def rooftop():
    return PlanRecord(
        id="plan_poblado_1",
        name="Rooftop Sunset",
        category="Rooftop",
        description="Terraza con vista a las montañas y cócteles al atardecer.",
        rating=4.8,
        tags=["Destacado"],
    )


@pytest.fixture()
def rng():
    return random.Random(42)


@pytest.fixture()
def greeted_history():
    return [
        ConversationTurn(role="user", content="hola"),
        ConversationTurn(
            role="assistant",
            content="¡Hola! Soy Parche AI. ¿Qué tipo de experiencia buscas?",
        ),
    ]


@pytest.fixture()
def romantic_history():
    return [
        ConversationTurn(role="user", content="quiero algo romántico"),
        ConversationTurn(
            role="assistant",
            content="Para algo romántico, estos lugares son top:\n\n**Rooftop Sunset**\n\n¿Cuál te llama más?",
        ),
    ]
