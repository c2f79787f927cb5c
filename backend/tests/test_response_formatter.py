from parche_ai.services import response_formatter as fmt
from parche_ai.services.models import Intent, PlanRecord
from parche_ai.services.vocabulary import DEFAULT_DESCRIPTION, NO_PLANS_REPLY


def test_single_plan_layout():
    plan = PlanRecord(
        id="p1", name="Pergamino Café", category="Café",
        description="Café de especialidad", rating=4.6, tags=["Chill"],
    )
    text = fmt.format_plans([plan], "Intro:", "¿Pregunta?")
    assert text == (
        "Intro:\n"
        "\n"
        "**Pergamino Café**\n"
        "Café – Café de especialidad\n"
        "⭐ 4.6/5\n"
        "Ideal para: experiencia especial\n"
        "\n"
        "¿Pregunta?"
    )


def test_one_bold_line_per_plan_in_order(catalog):
    plans = catalog[:3]
    text = fmt.format_plans(plans, "Intro:", "¿Cuál?")
    bold = [line for line in text.split("\n") if line.startswith("**") and line.endswith("**")]
    assert bold == [f"**{p.name}**" for p in plans]
    assert text.startswith("Intro:\n\n")
    assert text.endswith("\n\n¿Cuál?")


def test_no_plans_gives_clarification():
    assert fmt.format_plans([], "Intro:", "¿Cuál?") == NO_PLANS_REPLY


def test_rating_line_omitted_when_missing_or_zero():
    unrated = PlanRecord(id="p", name="Feria", category="Compras", rating=None)
    zero = PlanRecord(id="q", name="Feria", category="Compras", rating=0)
    for plan in (unrated, zero):
        assert not any(line.startswith("⭐") for line in fmt.format_plan(plan))


def test_short_description():
    assert fmt.short_description("a" * 80) == "a" * 80
    assert fmt.short_description("a" * 81) == "a" * 80 + "..."
    assert fmt.short_description("") == DEFAULT_DESCRIPTION
    assert fmt.short_description(None) == DEFAULT_DESCRIPTION


def test_plan_type():
    assert fmt.plan_type(PlanRecord(id="1", name="La 70 Bar Crawl", category="Vida nocturna")) == "Bar"
    assert fmt.plan_type(PlanRecord(id="2", name="Parque Arví", category="Naturaleza")) == "Parque"
    assert fmt.plan_type(PlanRecord(id="3", name="Ciclovía", category="Deporte")) == "Deporte"
    assert fmt.plan_type(PlanRecord(id="4", name="Algo")) == "Lugar"


def test_ideal_for_uses_plan_signals():
    assert fmt.ideal_for(PlanRecord(id="1", name="Cena", category="Romántico")) == "plan romántico o cita"
    assert fmt.ideal_for(PlanRecord(id="2", name="Discoteca X", category="")) == "rumba y fiesta"
    assert fmt.ideal_for(PlanRecord(id="3", name="X", category="Comida típica")) == "comer rico"
    assert fmt.ideal_for(PlanRecord(id="4", name="Parque", category="")) == "relax y charla tranquila"
    assert fmt.ideal_for(PlanRecord(id="5", name="X", category="Cultura")) == "cultura y aprendizaje"
    assert fmt.ideal_for(PlanRecord(id="6", name="X", category="Aventura")) == "aventura y deporte"
    assert fmt.ideal_for(PlanRecord(id="7", name="X", category="Cita", tags=["cita"])) == "plan romántico o cita"
    assert fmt.ideal_for(PlanRecord(id="8", name="X", category="Mirador", rating=4.4)) == "pasar el rato"


def test_intro_and_question():
    assert fmt.intro_and_question(Intent.ROMANTIC) == ("Para algo romántico, estos lugares son top:", "¿Cuál te llama más?")
    intro, _ = fmt.intro_and_question(Intent.REJECTION)
    assert intro.startswith("Entiendo, cambiemos de tema")
    assert fmt.intro_and_question(Intent.NONE) == ("Basándome en lo que dices, te recomiendo:", "¿Cuál te llama la atención?")
