# backend/lab/catalog.py
#
# Static reaction catalog. Order matters: detection is first-match-wins, so an
# earlier entry shadows any later entry whose reactants are also present.

from dataclasses import dataclass, field, asdict
from typing import Optional, Tuple

from .chemicals import canonical_id

REACTION_TYPES = (
    "synthesis",
    "decomposition",
    "single_replacement",
    "double_replacement",
    "acid_base",
    "combustion",
    "redox",
)
ENERGY_CLASSES = ("endothermic", "exothermic")
DANGER_LEVELS  = ("low", "medium", "high", "extreme")

CATALYST_FACTOR = 0.8


@dataclass(frozen=True)
class ColorChange:
    start: str
    end: str


@dataclass(frozen=True)
class ReactionDefinition:
    id: str
    name: str
    reactants: Tuple[str, ...]
    products: Tuple[str, ...]
    type: str
    energy: str
    temperature_required: float
    heat_generated: float
    danger_level: str
    balanced_equation: str
    description: str = ""
    conditions: Tuple[str, ...] = ()
    safety_warnings: Tuple[str, ...] = ()
    educational_notes: Tuple[str, ...] = ()
    mechanism: Tuple[str, ...] = ()
    color_change: Optional[ColorChange] = None
    gas_evolution: bool = False
    precipitate_formed: Optional[str] = None
    catalysts: Tuple[str, ...] = ()
    reactant_ids: Tuple[str, ...] = field(init=False, repr=False, compare=False)
    catalyst_ids: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.reactants:
            raise ValueError(f"{self.id}: a reaction needs at least one reactant")
        if self.type not in REACTION_TYPES:
            raise ValueError(f"{self.id}: unknown reaction type {self.type!r}")
        if self.energy not in ENERGY_CLASSES:
            raise ValueError(f"{self.id}: unknown energy class {self.energy!r}")
        if self.danger_level not in DANGER_LEVELS:
            raise ValueError(f"{self.id}: unknown danger level {self.danger_level!r}")
        # frozen: derived fields go through object.__setattr__
        object.__setattr__(self, "reactant_ids", tuple(canonical_id(r) for r in self.reactants))
        object.__setattr__(self, "catalyst_ids", tuple(canonical_id(c) for c in self.catalysts))

    def effective_temperature(self, catalyst_ids=()):
        """Activation threshold for one detection attempt.

        A catalyst listed for this reaction lowers the threshold by 20 %. The
        definition itself is never modified.
        """
        if self.catalyst_ids and any(c in self.catalyst_ids for c in catalyst_ids):
            return self.temperature_required * CATALYST_FACTOR
        return self.temperature_required

    def to_dict(self):
        data = asdict(self)
        for key in ("reactant_ids", "catalyst_ids"):
            data.pop(key, None)
        if self.color_change is not None:
            data["color_change"] = {"from": self.color_change.start, "to": self.color_change.end}
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data


# ── Catalog ───────────────────────────────────────────────────────────────────
REACTION_CATALOG = (
    ReactionDefinition(
        id="hcl_naoh_neutralization",
        name="Acid-Base Neutralization",
        reactants=("HCl", "NaOH"),
        products=("NaCl", "H₂O"),
        type="acid_base",
        energy="exothermic",
        temperature_required=20,
        conditions=("room temperature", "aqueous solution"),
        heat_generated=57.3,
        danger_level="medium",
        safety_warnings=("Generates heat", "Use eye protection"),
        description="Strong acid reacts with strong base to form salt and water",
        balanced_equation="HCl + NaOH → NaCl + H₂O",
        mechanism=(
            "H⁺ from acid combines with OH⁻ from base",
            "Forms water molecule",
            "Na⁺ and Cl⁻ remain as spectator ions",
        ),
        educational_notes=(
            "This is a classic neutralization reaction",
            "The pH changes from acidic/basic to neutral (7)",
            "Heat is released due to formation of water",
        ),
    ),
    ReactionDefinition(
        id="cuso4_naoh_precipitation",
        name="Copper Hydroxide Precipitation",
        reactants=("CuSO₄", "NaOH"),
        products=("Cu(OH)₂", "Na₂SO₄"),
        type="double_replacement",
        energy="exothermic",
        temperature_required=20,
        conditions=("room temperature", "aqueous solution"),
        heat_generated=15.2,
        color_change=ColorChange("#4169E1", "#87CEEB"),
        precipitate_formed="Cu(OH)₂",
        danger_level="low",
        safety_warnings=("Blue precipitate forms",),
        description="Copper sulfate reacts with sodium hydroxide to form copper hydroxide precipitate",
        balanced_equation="CuSO₄ + 2NaOH → Cu(OH)₂ + Na₂SO₄",
        mechanism=(
            "Cu²⁺ ions combine with OH⁻ ions",
            "Forms insoluble Cu(OH)₂ precipitate",
            "Na⁺ and SO₄²⁻ remain in solution",
        ),
        educational_notes=(
            "Example of a precipitation reaction",
            "Demonstrates solubility rules",
            "Blue color comes from Cu²⁺ ions",
        ),
    ),
    ReactionDefinition(
        id="mg_combustion",
        name="Magnesium Combustion",
        reactants=("Mg", "O₂"),
        products=("MgO",),
        type="combustion",
        energy="exothermic",
        temperature_required=650,
        conditions=("high temperature", "presence of oxygen"),
        heat_generated=601.6,
        color_change=ColorChange("#C0C0C0", "#FFFFFF"),
        danger_level="high",
        safety_warnings=("Extremely bright light", "Very hot flame", "Do not look directly at flame"),
        description="Magnesium burns in oxygen with brilliant white light",
        balanced_equation="2Mg + O₂ → 2MgO",
        mechanism=(
            "Magnesium atoms lose electrons to oxygen",
            "Forms ionic magnesium oxide",
            "Releases tremendous amount of energy",
        ),
        educational_notes=(
            "Classic example of metal oxidation",
            "Demonstrates exothermic reactions",
            "Used in fireworks and flares",
        ),
    ),
    ReactionDefinition(
        id="hcl_mg_replacement",
        name="Magnesium-Acid Reaction",
        reactants=("Mg", "HCl"),
        products=("MgCl₂", "H₂"),
        type="single_replacement",
        energy="exothermic",
        temperature_required=20,
        conditions=("room temperature", "aqueous acid"),
        heat_generated=462.0,
        gas_evolution=True,
        danger_level="medium",
        safety_warnings=("Hydrogen gas evolution", "Flammable gas produced"),
        description="Magnesium displaces hydrogen from hydrochloric acid",
        balanced_equation="Mg + 2HCl → MgCl₂ + H₂",
        mechanism=(
            "Magnesium atoms lose electrons",
            "H⁺ ions gain electrons to form H₂ gas",
            "Mg²⁺ and Cl⁻ remain in solution",
        ),
        educational_notes=(
            "Example of single displacement reaction",
            "Demonstrates reactivity series",
            "Hydrogen gas test: pop with burning splint",
        ),
    ),
    ReactionDefinition(
        id="h2so4_metal_danger",
        name="Sulfuric Acid Metal Reaction",
        reactants=("H₂SO₄", "Mg"),
        products=("MgSO₄", "H₂", "SO₂"),
        type="redox",
        energy="exothermic",
        temperature_required=20,
        conditions=("room temperature", "concentrated acid"),
        heat_generated=745.0,
        gas_evolution=True,
        danger_level="extreme",
        safety_warnings=(
            "DANGER: Toxic SO₂ gas produced",
            "Extremely exothermic reaction",
            "Use fume hood",
            "Emergency ventilation required",
        ),
        description="DANGEROUS: Sulfuric acid reacts violently with metals producing toxic gases",
        balanced_equation="Mg + 2H₂SO₄ → MgSO₄ + SO₂ + 2H₂O + H₂",
        mechanism=(
            "Multiple simultaneous reactions occur",
            "Produces toxic sulfur dioxide gas",
            "Extreme heat generation",
        ),
        educational_notes=(
            "DO NOT PERFORM without proper safety equipment",
            "Demonstrates why acid safety is critical",
            "Example of complex redox chemistry",
        ),
    ),
    ReactionDefinition(
        id="fe_cuso4_displacement",
        name="Metal Displacement",
        reactants=("Fe", "CuSO₄"),
        products=("FeSO₄", "Cu"),
        type="single_replacement",
        energy="exothermic",
        temperature_required=20,
        conditions=("room temperature", "aqueous solution"),
        heat_generated=153.9,
        color_change=ColorChange("#4169E1", "#8FBC8F"),
        danger_level="low",
        safety_warnings=("Copper deposit forms on the iron",),
        description="Iron displaces copper from copper sulfate solution",
        balanced_equation="Fe + CuSO₄ → FeSO₄ + Cu",
        mechanism=(
            "Fe atoms lose two electrons to become Fe²⁺",
            "Cu²⁺ ions gain electrons and deposit as copper metal",
        ),
        educational_notes=(
            "Iron is above copper in the reactivity series",
            "The blue solution fades to pale green",
        ),
    ),
    ReactionDefinition(
        id="h2o2_decomposition",
        name="Hydrogen Peroxide Decomposition",
        reactants=("H₂O₂",),
        products=("H₂O", "O₂"),
        type="decomposition",
        energy="exothermic",
        temperature_required=60,
        catalysts=("MnO₂", "KMnO₄"),
        conditions=("warm solution", "catalyst speeds the reaction"),
        heat_generated=98.2,
        gas_evolution=True,
        danger_level="medium",
        safety_warnings=("Rapid oxygen release", "Hot foam may overflow the container"),
        description="Hydrogen peroxide breaks down into water and oxygen gas",
        balanced_equation="2H₂O₂ → 2H₂O + O₂",
        mechanism=(
            "Peroxide O–O bond breaks on the catalyst surface",
            "Oxygen atoms pair up and leave as O₂ gas",
        ),
        educational_notes=(
            "A catalyst lowers the activation energy without being consumed",
            "Known as the elephant toothpaste demonstration",
        ),
    ),
    ReactionDefinition(
        id="sodium_water",
        name="Sodium-Water Reaction",
        reactants=("Na", "H₂O"),
        products=("NaOH", "H₂"),
        type="single_replacement",
        energy="exothermic",
        temperature_required=0,
        conditions=("any temperature above freezing",),
        heat_generated=184.0,
        gas_evolution=True,
        danger_level="high",
        safety_warnings=("Hydrogen may ignite", "Use only a pea-sized piece", "Stand behind a safety screen"),
        description="Sodium metal reacts violently with water releasing hydrogen",
        balanced_equation="2Na + 2H₂O → 2NaOH + H₂",
        mechanism=(
            "Sodium donates its valence electron to water",
            "Hydroxide ions and hydrogen gas form",
        ),
        educational_notes=(
            "Alkali metals become more reactive down the group",
            "The resulting solution is strongly basic",
        ),
    ),
    ReactionDefinition(
        id="vinegar_baking_soda",
        name="Vinegar and Baking Soda",
        reactants=("CH₃COOH", "NaHCO₃"),
        products=("CH₃COONa", "H₂O", "CO₂"),
        type="acid_base",
        energy="endothermic",
        temperature_required=5,
        conditions=("room temperature",),
        heat_generated=-28.0,
        gas_evolution=True,
        danger_level="low",
        safety_warnings=("Foams vigorously",),
        description="Acetic acid reacts with sodium bicarbonate releasing carbon dioxide",
        balanced_equation="CH₃COOH + NaHCO₃ → CH₃COONa + H₂O + CO₂",
        mechanism=(
            "H⁺ protonates the bicarbonate ion",
            "Carbonic acid decomposes into water and CO₂",
        ),
        educational_notes=(
            "The mixture feels cooler as the reaction absorbs heat",
            "CO₂ bubbles extinguish a lit splint",
        ),
    ),
    ReactionDefinition(
        id="silver_chloride_precipitation",
        name="Silver Chloride Precipitation",
        reactants=("AgNO₃", "NaCl"),
        products=("AgCl", "NaNO₃"),
        type="double_replacement",
        energy="exothermic",
        temperature_required=20,
        conditions=("room temperature", "aqueous solution"),
        heat_generated=65.5,
        color_change=ColorChange("#F8F8FF", "#FFFFFF"),
        precipitate_formed="AgCl",
        danger_level="low",
        safety_warnings=("Silver nitrate stains skin",),
        description="Silver ions combine with chloride to form a white precipitate",
        balanced_equation="AgNO₃ + NaCl → AgCl + NaNO₃",
        mechanism=("Ag⁺ and Cl⁻ combine into insoluble AgCl",),
        educational_notes=("Standard test for chloride ions",),
    ),
)

_BY_ID = {r.id: r for r in REACTION_CATALOG}


def get_reaction(reaction_id):
    return _BY_ID.get(reaction_id)


def reactions_by_type(reaction_type, catalog=REACTION_CATALOG):
    return [r for r in catalog if r.type == reaction_type]
