import pytest

from lab.catalog import REACTION_CATALOG, ReactionDefinition, get_reaction, reactions_by_type
from lab.chemicals import canonical_id
from lab.engine import ReactionEngine


@pytest.fixture
def engine():
    return ReactionEngine()


def _definition(reaction_id, reactants=("HCl", "NaOH"), temperature=20):
    return ReactionDefinition(
        id=reaction_id,
        name=reaction_id.title(),
        reactants=reactants,
        products=("NaCl", "H₂O"),
        type="acid_base",
        energy="exothermic",
        temperature_required=temperature,
        heat_generated=1.0,
        danger_level="low",
        balanced_equation="",
    )


def test_display_names_match_formula_reactants(engine):
    reaction = engine.detect_reaction(["Hydrochloric Acid", "Sodium Hydroxide"], 20)
    assert reaction is not None
    assert reaction.id == "hcl_naoh_neutralization"
    assert reaction.name == "Acid-Base Neutralization"
    assert reaction.type == "acid_base"


def test_formula_and_subscript_forms_are_equivalent(engine):
    assert engine.detect_reaction(["HCl", "NaOH"], 20).id == "hcl_naoh_neutralization"
    assert engine.detect_reaction(["H₂SO₄", "Magnesium"], 20).id == "h2so4_metal_danger"
    assert engine.detect_reaction(["H2SO4", "Mg"], 20).id == "h2so4_metal_danger"


def test_detection_is_deterministic(engine):
    first = [engine.detect_reaction(["CuSO4", "NaOH"], 25) for _ in range(5)]
    assert all(r is first[0] for r in first)
    assert first[0].id == "cuso4_naoh_precipitation"


def test_first_match_wins_in_catalog_order(engine):
    # neutralization precedes the copper precipitation in the catalog
    assert engine.detect_reaction(["CuSO4", "NaOH", "HCl"], 20).id == "hcl_naoh_neutralization"
    # magnesium-acid precedes the sulfuric acid reaction
    assert engine.detect_reaction(["H2SO4", "HCl", "Mg"], 20).id == "hcl_mg_replacement"


def test_first_match_wins_with_custom_catalog():
    early, late = _definition("early"), _definition("late")
    assert ReactionEngine(catalog=(early, late)).detect_reaction(["HCl", "NaOH"], 20) is early
    assert ReactionEngine(catalog=(late, early)).detect_reaction(["HCl", "NaOH"], 20) is late


def test_temperature_gating(engine):
    assert engine.detect_reaction(["Mg", "O2"], 20) is None
    assert engine.detect_reaction(["Mg", "O2"], 649.9) is None
    assert engine.detect_reaction(["Mg", "O2"], 650).id == "mg_combustion"


def test_neutralization_is_gated_below_room_temperature(engine):
    assert engine.detect_reaction(["HCl", "NaOH"], 19) is None


def test_empty_and_unknown_chemicals_never_match(engine):
    assert engine.detect_reaction([], 1000) is None
    assert engine.detect_reaction(["Unobtainium", "Phlogiston"], 1000) is None


def test_partial_formula_does_not_cross_match(engine):
    # "Na" must not be found inside "NaOH" or "Sodium Chloride"
    assert engine.detect_reaction(["NaOH", "Water"], 20) is None
    assert engine.detect_reaction(["Sodium Chloride", "Water"], 20) is None
    assert engine.detect_reaction(["Sodium", "Water"], 20).id == "sodium_water"


def test_reactants_are_not_consumed(engine):
    chemicals = ["HCl", "NaOH"]
    assert engine.detect_reaction(chemicals, 20) is engine.detect_reaction(chemicals, 20)
    assert chemicals == ["HCl", "NaOH"]


def test_catalyst_lowers_threshold_for_one_call_only(engine):
    peroxide = get_reaction("h2o2_decomposition")
    assert engine.perform_reaction(["H2O2"], 50) is None
    assert engine.perform_reaction(["H2O2"], 50, catalyst="MnO2") is peroxide
    assert peroxide.temperature_required == 60
    assert engine.perform_reaction(["H2O2"], 50) is None


def test_catalyst_in_container_counts(engine):
    assert engine.detect_reaction(["Hydrogen Peroxide", "Manganese Dioxide"], 48.5).id == "h2o2_decomposition"
    assert engine.detect_reaction(["Hydrogen Peroxide", "Manganese Dioxide"], 47) is None


def test_unrelated_catalyst_is_ignored(engine):
    assert engine.detect_reaction(["H2O2"], 50, catalysts=["NaCl"]) is None


def test_safety_runs_even_when_a_reaction_matches(engine):
    reaction = engine.detect_reaction(["H2SO4", "Mg"], 20)
    assert reaction.id == "h2so4_metal_danger"
    assert reaction.danger_level == "extreme"
    messages = [a.message for a in engine.safety_alerts]
    assert "EXTREME DANGER: Produces toxic SO₂ gas and extreme heat" in messages
    assert all(a.level == "critical" for a in engine.safety_alerts)


def test_safety_runs_when_nothing_matches(engine):
    assert engine.detect_reaction(["HCl", "H2SO4"], 20) is None
    assert [a.message for a in engine.safety_alerts] == ["CAUTION: Mixing acids can cause violent reactions"]


def test_alerts_accumulate_until_cleared(engine):
    engine.detect_reaction(["HCl", "H2SO4"], 20)
    engine.detect_reaction(["HCl", "H2SO4"], 20)
    assert len(engine.safety_alerts) == 2
    engine.clear_safety_alerts()
    assert engine.safety_alerts == ()


def test_perform_reaction_records_history(engine):
    reaction = engine.perform_reaction(["HCl", "NaOH"])
    assert engine.active_reactions == [reaction]
    assert engine.reaction_history == [reaction]
    assert engine.perform_reaction(["Water"]) is None
    assert len(engine.reaction_history) == 1


def test_reactions_by_type(engine):
    assert [r.id for r in engine.reactions_by_type("acid_base")] == [
        "hcl_naoh_neutralization", "vinegar_baking_soda",
    ]
    assert reactions_by_type("combustion") == [get_reaction("mg_combustion")]
    assert engine.reactions_by_type("nuclear") == []


def test_predict_product_properties(engine):
    copper = get_reaction("cuso4_naoh_precipitation")
    props = engine.predict_product_properties(copper, temperature=20, pressure=1.0)
    assert props["color"] == "#87CEEB"
    assert props["state"] == "suspension"
    assert engine.predict_product_properties(get_reaction("h2so4_metal_danger"))["stability"] == "unstable"


def test_catalog_entries_are_valid_and_unique():
    ids = [r.id for r in REACTION_CATALOG]
    assert len(ids) == len(set(ids))
    assert [r.id for r in REACTION_CATALOG[:5]] == [
        "hcl_naoh_neutralization",
        "cuso4_naoh_precipitation",
        "mg_combustion",
        "hcl_mg_replacement",
        "h2so4_metal_danger",
    ]
    for reaction in REACTION_CATALOG:
        assert reaction.reactant_ids == tuple(canonical_id(r) for r in reaction.reactants)


def test_definition_rejects_empty_reactants():
    with pytest.raises(ValueError):
        _definition("empty", reactants=())


def test_definition_to_dict_is_json_friendly():
    data = get_reaction("mg_combustion").to_dict()
    assert data["reactants"] == ["Mg", "O₂"]
    assert data["color_change"] == {"from": "#C0C0C0", "to": "#FFFFFF"}
    assert "reactant_ids" not in data
