# backend/lab/chemicals.py
#
# Chemical registry and alias table. Every label, formula and alias a user can
# type resolves to exactly one canonical id; reactions and safety rules match
# on canonical ids only.

import re

# ── Chemical registry ─────────────────────────────────────────────────────────
CHEMICALS = {
    "HCl":       {"label": "Hydrochloric Acid",      "formula": "HCl",        "category": "acid",     "color": "#FFD700", "danger_level": "high",    "state": "liquid", "ph": 1.0,  "molar_mass": 36.46,  "hazards": ["Corrosive", "Toxic vapour"],          "aliases": ["Muriatic Acid"]},
    "H2SO4":     {"label": "Sulfuric Acid",          "formula": "H₂SO₄",      "category": "acid",     "color": "#FFFF99", "danger_level": "extreme", "state": "liquid", "ph": 0.5,  "molar_mass": 98.079, "hazards": ["Corrosive", "Dehydrating agent"],     "aliases": []},
    "HNO3":      {"label": "Nitric Acid",            "formula": "HNO₃",       "category": "acid",     "color": "#FFFACD", "danger_level": "high",    "state": "liquid", "ph": 1.0,  "molar_mass": 63.01,  "hazards": ["Corrosive", "Oxidizer"],              "aliases": []},
    "C6H8O7":    {"label": "Citric Acid",            "formula": "C₆H₈O₇",     "category": "acid",     "color": "#FFFFF0", "danger_level": "low",     "state": "liquid", "ph": 2.2,  "molar_mass": 192.12, "hazards": ["Eye irritant"],                       "aliases": ["CitricAcid"]},
    "CH3COOH":   {"label": "Acetic Acid",            "formula": "CH₃COOH",    "category": "organic",  "color": "#F5F5DC", "danger_level": "low",     "state": "liquid", "ph": 2.4,  "molar_mass": 60.05,  "hazards": ["Flammable", "Irritant"],              "aliases": ["AceticAcid", "Vinegar"]},
    "NaOH":      {"label": "Sodium Hydroxide",       "formula": "NaOH",       "category": "base",     "color": "#87CEEB", "danger_level": "medium",  "state": "liquid", "ph": 13.0, "molar_mass": 39.997, "hazards": ["Caustic"],                            "aliases": ["Caustic Soda", "Lye"]},
    "KOH":       {"label": "Potassium Hydroxide",    "formula": "KOH",        "category": "base",     "color": "#B0E0E6", "danger_level": "medium",  "state": "liquid", "ph": 13.5, "molar_mass": 56.11,  "hazards": ["Caustic"],                            "aliases": []},
    "NH3":       {"label": "Ammonia Solution",       "formula": "NH₃",        "category": "base",     "color": "#F0FFFF", "danger_level": "medium",  "state": "liquid", "ph": 11.6, "molar_mass": 17.031, "hazards": ["Irritant vapour"],                    "aliases": ["Ammonia"]},
    "CaOH2":     {"label": "Calcium Hydroxide",      "formula": "Ca(OH)₂",    "category": "base",     "color": "#FFFAFA", "danger_level": "low",     "state": "liquid", "ph": 12.4, "molar_mass": 74.09,  "hazards": ["Irritant"],                           "aliases": ["Limewater"]},
    "NaHCO3":    {"label": "Sodium Bicarbonate",     "formula": "NaHCO₃",     "category": "base",     "color": "#FFFFFF", "danger_level": "low",     "state": "solid",  "ph": 8.3,  "molar_mass": 84.007, "hazards": [],                                     "aliases": ["Baking Soda"]},
    "H2O":       {"label": "Distilled Water",        "formula": "H₂O",        "category": "solvent",  "color": "#E0FFFF", "danger_level": "low",     "state": "liquid", "ph": 7.0,  "molar_mass": 18.015, "hazards": [],                                     "aliases": ["Water"]},
    "C2H5OH":    {"label": "Ethanol",                "formula": "C₂H₅OH",     "category": "organic",  "color": "#F8F8FF", "danger_level": "medium",  "state": "liquid", "ph": 7.0,  "molar_mass": 46.07,  "hazards": ["Highly flammable"],                   "aliases": ["Ethyl Alcohol"]},
    "C12H22O11": {"label": "Sugar Solution",         "formula": "C₁₂H₂₂O₁₁",  "category": "organic",  "color": "#FFF8DC", "danger_level": "low",     "state": "liquid", "ph": 7.0,  "molar_mass": 342.3,  "hazards": [],                                     "aliases": ["Sucrose", "SugarSol"]},
    "NaCl":      {"label": "Sodium Chloride",        "formula": "NaCl",       "category": "salt",     "color": "#FFFFFF", "danger_level": "low",     "state": "solid",  "ph": 7.0,  "molar_mass": 58.44,  "hazards": [],                                     "aliases": ["Salt", "Saline Solution", "NaClSol"]},
    "CuSO4":     {"label": "Copper Sulfate",         "formula": "CuSO₄",      "category": "salt",     "color": "#4169E1", "danger_level": "medium",  "state": "solid",  "ph": 4.0,  "molar_mass": 159.609,"hazards": ["Harmful if swallowed"],               "aliases": ["Copper(II) Sulfate"]},
    "AgNO3":     {"label": "Silver Nitrate",         "formula": "AgNO₃",      "category": "salt",     "color": "#F8F8FF", "danger_level": "medium",  "state": "liquid", "ph": 6.0,  "molar_mass": 169.87, "hazards": ["Stains skin", "Oxidizer"],            "aliases": []},
    "Fe2O3":     {"label": "Iron Oxide",             "formula": "Fe₂O₃",      "category": "metal",    "color": "#CD853F", "danger_level": "low",     "state": "solid",  "ph": None, "molar_mass": 159.687,"hazards": [],                                     "aliases": ["Rust"]},
    "Fe":        {"label": "Iron",                   "formula": "Fe",         "category": "metal",    "color": "#A19D94", "danger_level": "low",     "state": "solid",  "ph": None, "molar_mass": 55.845, "hazards": [],                                     "aliases": ["Iron Filings"]},
    "Mg":        {"label": "Magnesium",              "formula": "Mg",         "category": "metal",    "color": "#C0C0C0", "danger_level": "medium",  "state": "solid",  "ph": None, "molar_mass": 24.305, "hazards": ["Flammable solid"],                    "aliases": ["Magnesium Ribbon"]},
    "Na":        {"label": "Sodium",                 "formula": "Na",         "category": "metal",    "color": "#D3D3D3", "danger_level": "high",    "state": "solid",  "ph": None, "molar_mass": 22.99,  "hazards": ["Reacts violently with water"],        "aliases": ["Sodium Metal"]},
    "O2":        {"label": "Oxygen",                 "formula": "O₂",         "category": "gas",      "color": "#F0F8FF", "danger_level": "medium",  "state": "gas",    "ph": None, "molar_mass": 31.998, "hazards": ["Supports combustion"],                "aliases": []},
    "H2O2":      {"label": "Hydrogen Peroxide",      "formula": "H₂O₂",       "category": "oxidizer", "color": "#F0FFFF", "danger_level": "medium",  "state": "liquid", "ph": 6.2,  "molar_mass": 34.014, "hazards": ["Oxidizer", "Irritant"],               "aliases": ["Peroxide"]},
    "MnO2":      {"label": "Manganese Dioxide",      "formula": "MnO₂",       "category": "oxidizer", "color": "#2F2F2F", "danger_level": "low",     "state": "solid",  "ph": None, "molar_mass": 86.94,  "hazards": ["Harmful if inhaled"],                 "aliases": []},
    "KMnO4":     {"label": "Potassium Permanganate", "formula": "KMnO₄",      "category": "oxidizer", "color": "#800080", "danger_level": "medium",  "state": "solid",  "ph": 7.0,  "molar_mass": 158.034,"hazards": ["Strong oxidizer", "Stains"],          "aliases": []},
    "HIn":       {"label": "Phenolphthalein",        "formula": "C₂₀H₁₄O₄",   "category": "indicator","color": "#FFFFFF", "danger_level": "low",     "state": "liquid", "ph": None, "molar_mass": 318.32, "hazards": [],                                     "aliases": ["Indicator"]},
}

CATEGORIES = ("acid", "base", "salt", "organic", "metal", "indicator", "solvent", "gas", "oxidizer")

_SUBSCRIPTS = str.maketrans("₀₁₂₃₄₅₆₇₈₉", "0123456789")
_AQUEOUS    = re.compile(r"\s*\(aq\)$")
_SPACES     = re.compile(r"\s+")


def normalize(name):
    """Case-folded, subscript-free, whitespace-collapsed form of a chemical name."""
    text = str(name).translate(_SUBSCRIPTS).strip()
    text = _SPACES.sub(" ", text).casefold()
    return _AQUEOUS.sub("", text)


def _build_aliases():
    table = {}
    for chem_id, meta in CHEMICALS.items():
        for alias in (chem_id, meta["label"], meta["formula"], *meta["aliases"]):
            key = normalize(alias)
            owner = table.setdefault(key, chem_id)
            if owner != chem_id:
                raise ValueError(f"Alias {alias!r} claimed by both {owner} and {chem_id}")
    return table


ALIASES = _build_aliases()


def canonical_id(name):
    """Resolve a display name or formula to its canonical id.

    Unknown names resolve to their normalized text, so they only ever match an
    identical unknown name.
    """
    key = normalize(name)
    return ALIASES.get(key, key)


def is_known(name):
    return normalize(name) in ALIASES


def get_chemical(name):
    chem_id = canonical_id(name)
    meta = CHEMICALS.get(chem_id)
    if meta is None:
        return None
    return {"id": chem_id, **meta}


def category_of(name):
    meta = CHEMICALS.get(canonical_id(name))
    return meta["category"] if meta else None


def color_of(name, default="#87CEEB"):
    meta = CHEMICALS.get(canonical_id(name))
    return meta["color"] if meta else default


def ph_of(name):
    meta = CHEMICALS.get(canonical_id(name))
    return meta["ph"] if meta else None


def library(category=None, search=None):
    """Registry entries as API payloads, optionally filtered like the library panel."""
    term = normalize(search) if search else None
    payload = []
    for chem_id, meta in CHEMICALS.items():
        if category and category != "all" and meta["category"] != category:
            continue
        if term and term not in normalize(meta["label"]) and term not in normalize(meta["formula"]):
            continue
        payload.append({"id": chem_id, **meta})
    return payload


# ── Experiment templates ──────────────────────────────────────────────────────
EXPERIMENT_TEMPLATES = [
    {
        "title":           "Acid-Base Neutralization",
        "chemicals":       ["HCl", "NaOH"],
        "procedure":       "Add equal amounts of HCl and NaOH to observe neutralization",
        "expected_result": "Heat generation and color change",
        "difficulty":      "Beginner",
    },
    {
        "title":           "Copper Precipitation",
        "chemicals":       ["CuSO₄", "NaOH"],
        "procedure":       "Add NaOH to CuSO₄ solution to form precipitate",
        "expected_result": "Blue precipitate formation",
        "difficulty":      "Intermediate",
    },
    {
        "title":           "Magnesium Combustion",
        "chemicals":       ["Mg", "O₂"],
        "procedure":       "Heat magnesium strip over burner",
        "expected_result": "Bright white flame",
        "difficulty":      "Advanced",
    },
    {
        "title":           "Elephant Toothpaste",
        "chemicals":       ["H₂O₂", "MnO₂"],
        "procedure":       "Warm hydrogen peroxide and add a pinch of manganese dioxide",
        "expected_result": "Rapid oxygen evolution",
        "difficulty":      "Intermediate",
    },
]
