"""
Parche AI vocabulary and copy.

Every keyword list and canned sentence the local pipeline uses lives here,
so the rules can be read, tested and extended without touching control flow.
All keywords are lowercase; matching is plain substring containment.
"""

from typing import Dict, List, Tuple

from parche_ai.services.models import Intent

# ---------------------------------------------------------------------------
# Short-circuit detectors
# ---------------------------------------------------------------------------

TOO_SHORT_MAX_LENGTH = 3
TOO_SHORT_WORDS = {"m", "no sé", "nose", "ns"}

REJECTION_WORDS = {"nope", "no", "no me gusta", "nah"}
REJECTION_PHRASES = ("no me interesa", "no quiero")

GREETING_WORDS = [
    "hola", "hi", "hey", "buenos días", "buenas tardes", "buenas noches",
    "qué tal", "que tal", "qué hay", "que hay", "qué pasa", "que pasa",
    "buen día", "buendía", "saludos", "qué más", "que más",
]

# Markers that a greeting already happened somewhere in the conversation
GREETING_MEMORY_MARKERS = ("hola", "hey", "qué tal")

GENERAL_MESSAGE_MAX_LENGTH = 15
REQUEST_VERBS = ("busco", "quiero", "necesito", "recomienda", "dónde", "donde")

# ---------------------------------------------------------------------------
# Intent vocabularies (priority order: first match wins)
# ---------------------------------------------------------------------------

INTENT_KEYWORDS: Dict[Intent, List[str]] = {
    Intent.ROMANTIC: [
        "romántico", "romantico", "romántica", "romantica", "romance",
        "pareja", "cita", "cena romántica", "cena romantica", "aniversario",
        "novia", "novio", "enamorad",
    ],
    Intent.NIGHTLIFE: [
        "noche", "nocturno", "nocturna", "rumba", "rumbear", "fiesta",
        "bebida", "bar", "discoteca", "antro", "bailar", "trago", "farra",
    ],
    Intent.FOOD: [
        "comida", "comer", "restaurante", "gastronomía", "gastronomia",
        "cenar", "almorzar", "almuerzo", "desayuno", "hambre", "antojo",
        "delicioso",
    ],
    Intent.ADVENTURE: [
        "aventura", "deporte", "ejercicio", "caminar", "caminata",
        "senderismo", "trekking", "bicicleta", "escalar", "parapente",
        "extremo",
    ],
    Intent.CULTURE: [
        "cultura", "cultural", "museo", "arte", "teatro", "música", "musica",
        "concierto", "exposición", "exposicion", "historia", "galería",
        "galeria",
    ],
    Intent.NATURE_CHILL: [
        # nature
        "naturaleza", "parque", "aire libre", "piscina", "playa", "montaña",
        "montana", "senderos",
        # chill
        "relajarse", "relajar", "chill", "tranquilo", "tranquila", "calma",
        "descansar",
    ],
}

# Substrings in the previous assistant reply that reveal which category it offered
ASSISTANT_CATEGORY_MARKERS: List[Tuple[Intent, Tuple[str, ...]]] = [
    (Intent.ROMANTIC, ("romántic",)),
    (Intent.NIGHTLIFE, ("rumba", "nocturno")),
    (Intent.FOOD, ("comida", "restaurante")),
    (Intent.ADVENTURE, ("aventura", "deporte")),
    (Intent.CULTURE, ("cultura", "museo")),
    (Intent.NATURE_CHILL, ("naturaleza", "parque")),
]

# ---------------------------------------------------------------------------
# Catalog predicates: which plans belong to a category
# ---------------------------------------------------------------------------

ROMANTIC_MIN_RATING = 4.5

PLAN_FILTERS: Dict[Intent, Dict[str, Tuple[str, ...]]] = {
    Intent.ROMANTIC: {
        "category": ("romántico", "romantico", "romántica", "romantica"),
        "name": ("romántico", "romantico", "rooftop"),
        "tags": ("romántic", "romantic", "cita", "pareja"),
    },
    Intent.NIGHTLIFE: {
        "category": ("nocturno", "nocturna", "rumba", "fiesta"),
        "name": ("bar", "discoteca", "antro"),
        "tags": ("rumba", "fiesta", "nocturno"),
    },
    Intent.FOOD: {
        "category": ("comida", "restaurante", "gastronom"),
        "name": ("restaurante", "comida"),
        "tags": ("comida", "restaurante", "gastronom"),
    },
    Intent.ADVENTURE: {
        "category": ("aventura", "deporte", "ejercicio"),
        "name": (),
        "tags": ("aventura", "deporte"),
    },
    Intent.CULTURE: {
        "category": ("cultura", "museo", "arte"),
        "name": ("museo", "teatro"),
        "tags": ("cultura", "museo", "arte"),
    },
    Intent.NATURE_CHILL: {
        "category": ("naturaleza", "parque", "rooftop"),
        "name": ("parque",),
        "tags": ("naturaleza", "parque", "chill"),
    },
}

# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

DESCRIPTION_MAX_CHARS = 80
DEFAULT_DESCRIPTION = "Lugar chévere para pasar el rato"
DEFAULT_PLAN_TYPE = "Lugar"

# (keywords checked in category or name, label)
VENUE_TYPES: List[Tuple[Tuple[str, ...], str]] = [
    (("rooftop",), "Rooftop"),
    (("bar",), "Bar"),
    (("restaurante",), "Restaurante"),
    (("café", "cafe"), "Café"),
    (("parque",), "Parque"),
    (("mirador",), "Mirador"),
    (("club",), "Club"),
    (("discoteca",), "Discoteca"),
    (("museo",), "Museo"),
    (("teatro",), "Teatro"),
]

# "Ideal para" blurbs: (category keywords, name keywords, tag keywords, blurb)
IDEAL_FOR_RULES: List[Tuple[Tuple[str, ...], Tuple[str, ...], Tuple[str, ...], str]] = [
    (("romántic",), ("romántic",), ("romántic", "cita"), "plan romántico o cita"),
    (("nocturno", "rumba"), ("bar", "discoteca"), (), "rumba y fiesta"),
    (("comida", "restaurante"), ("restaurante",), (), "comer rico"),
    (("parque", "naturaleza"), ("parque",), (), "relax y charla tranquila"),
    (("cultura", "museo", "arte"), (), (), "cultura y aprendizaje"),
    (("aventura", "deporte"), (), (), "aventura y deporte"),
]
IDEAL_FOR_HIGH_RATING = "experiencia especial"
IDEAL_FOR_HIGH_RATING_MIN = 4.5
IDEAL_FOR_DEFAULT = "pasar el rato"

# (intro, closing question) per intent
INTRO_AND_QUESTION: Dict[Intent, Tuple[str, str]] = {
    Intent.ROMANTIC: ("Para algo romántico, estos lugares son top:", "¿Cuál te llama más?"),
    Intent.NIGHTLIFE: ("Para la rumba, estos planes suenan:", "¿Cuál te pica?"),
    Intent.FOOD: ("Para comer rico, estos lugares valen la pena:", "¿Cuál te tienta más?"),
    Intent.ADVENTURE: ("Para aventura, estos planes están chéveres:", "¿Cuál te anima?"),
    Intent.CULTURE: ("Para cultura, estos lugares son interesantes:", "¿Cuál te interesa?"),
    Intent.NATURE_CHILL: ("Para relajarse, estos planes están tranquilos:", "¿Cuál te gusta más?"),
    Intent.REJECTION: ("Entiendo, cambiemos de tema. Te propongo esto:", "¿Te llama más la atención alguno de estos?"),
}
DEFAULT_INTRO_AND_QUESTION = ("Basándome en lo que dices, te recomiendo:", "¿Cuál te llama la atención?")

# ---------------------------------------------------------------------------
# Canned replies
# ---------------------------------------------------------------------------

CLARIFICATION_REPLY = (
    "Necesito un poco más de info para ayudarte mejor. "
    "¿Qué tipo de plan buscas? ¿Romántico, rumba, comida, naturaleza, cultura...?"
)
WELCOME_REPLY = (
    "¡Hola! Soy Parche AI, tu compa que conoce todos los planes chéveres de Medellín. "
    "¿Qué tipo de experiencia buscas? ¿Romántico, rumba, comida, naturaleza, cultura o algo más tranquilo?"
)
REPEAT_GREETING_REPLY = "¿Qué tipo de plan te interesa? Romántico, rumba, comida, naturaleza, cultura..."
NO_PLANS_REPLY = "No tengo planes específicos para eso ahora. ¿Puedes darme más detalles de lo que buscas?"

# ---------------------------------------------------------------------------
# Upstream failures surfaced to the user
# ---------------------------------------------------------------------------

RATE_LIMITED_REPLY = "Demasiadas solicitudes. Por favor espera un momento antes de intentar de nuevo."
UPSTREAM_UNAVAILABLE_REPLY = "Problemas del servidor. Por favor intenta de nuevo en unos minutos."
CONNECTION_ERROR_REPLY = "Error de conexión. Verifica tu conexión a internet."
EMPTY_COMPLETION_REPLY = "Lo siento, no pude procesar tu solicitud en este momento."
TECHNICAL_PROBLEM_REPLY = "Disculpa, tengo problemas técnicos en este momento. ¿Podrías intentar de nuevo?"
