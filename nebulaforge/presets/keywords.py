"""Keyword tables scanned by the prompt hint extractor.

Matching is first-hit in declared order, so the order of every table below is
part of the classifier's behavior. Reordering entries changes the outcome for
prompts that hit more than one entry.
"""

GEOMETRY_KEYWORDS = {
    "sphere": ("orb", "sphere", "globe", "planet", "eye", "bubble", "core"),
    "box": ("cube", "block", "fortress", "monolith", "crate", "terminal"),
    "torus": ("ring", "halo", "loop", "portal", "gateway", "donut"),
    "cylinder": ("tower", "pillar", "rocket", "barrel", "staff", "sword", "blade", "engine", "cannon"),
    "cone": ("spike", "spire", "pyramid", "mountain", "fang", "icicle"),
    "icosahedron": ("crystal", "shard", "polyhedron", "geode", "gem", "diamond"),
}

COLOR_KEYWORDS = {
    "#ef4444": ("red", "scarlet", "crimson", "ruby"),
    "#f59e0b": ("gold", "amber", "sunset", "bronze", "copper"),
    "#3b82f6": ("blue", "azure", "sapphire", "cyan"),
    "#22c55e": ("green", "emerald", "jade", "lime"),
    "#a855f7": ("purple", "violet", "magenta", "neon"),
    "#f472b6": ("pink", "rose", "fuchsia"),
    "#e5e7eb": ("white", "silver", "pearl"),
    "#1f2937": ("black", "obsidian", "onyx", "shadow"),
    "#f97316": ("orange", "sunrise", "ember"),
    "#94a3b8": ("steel", "gray", "gunmetal"),
}

ENVIRONMENT_KEYWORDS = {
    "studio": ("studio", "product", "turntable", "showroom"),
    "city": ("city", "urban", "neon", "street", "industrial"),
    "sunset": ("sunset", "dusk", "golden hour", "desert", "forest"),
    "nebula": ("space", "nebula", "galaxy", "cosmic", "void"),
}

# Single-object cues win over multi-object cues
SINGLE_OBJECT_KEYWORDS = ("statue", "bust", "monolith", "idol", "single", "solo", "portrait")
MULTI_OBJECT_KEYWORDS = ("fleet", "swarm", "array", "cluster", "forest", "army", "collection", "pack", "hive")

# Organic is checked before mechanical
DETAIL_BIAS_KEYWORDS = {
    "organic": ("creature", "organic", "flora", "fauna", "dragon", "beast", "character", "alien", "mythic"),
    "mechanical": ("robot", "mech", "engine", "industrial", "armor", "cyber", "drone", "vehicle", "turret"),
}

VECTOR_NAME_SEEDS = ("Nebula", "Axiom", "Vertex", "Pulse", "Aurora", "Helix", "Solace")

GEOMETRY_TITLES = {
    "sphere": "Core",
    "box": "Hull",
    "torus": "Ring",
    "cylinder": "Column",
    "cone": "Spire",
    "icosahedron": "Shard",
}


def includes_any(text: str, terms) -> bool:
    """Plain substring containment, no word boundaries."""
    return any(term in text for term in terms)


def first_match(text: str, table: dict):
    """Key of the first table entry with a term contained in ``text``."""
    for key, terms in table.items():
        if includes_any(text, terms):
            return key
    return None
