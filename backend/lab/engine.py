# backend/lab/engine.py

import logging

from . import safety
from .catalog import REACTION_CATALOG
from .chemicals import canonical_id

logger = logging.getLogger(__name__)


class ReactionEngine:
    """Matches container contents against the reaction catalog.

    Detection is first-match-wins in catalog order: a reaction is eligible when
    every one of its reactants resolves to a canonical id present in the
    container and the temperature reaches its (possibly catalysed) threshold.
    Safety checking always runs first and is independent of the outcome.

    Safety alerts accumulate until ``clear_safety_alerts`` is called; they are
    never dismissed automatically.
    """

    def __init__(self, catalog=REACTION_CATALOG):
        self.catalog           = tuple(catalog)
        self._alerts           = []
        self.active_reactions  = []
        self.reaction_history  = []

    # ── Safety ───────────────────────────────────────────────────────────────
    @property
    def safety_alerts(self):
        return tuple(self._alerts)

    def check_safety(self, chemicals, temperature):
        alerts = safety.check_safety(chemicals, temperature)
        self._alerts.extend(alerts)
        return alerts

    def clear_safety_alerts(self):
        self._alerts.clear()

    # ── Detection ────────────────────────────────────────────────────────────
    def match(self, chemicals, temperature, catalysts=()):
        """Pure catalog scan with no safety side effects."""
        present = {canonical_id(c) for c in chemicals}
        if not present:
            return None
        catalyst_ids = {canonical_id(c) for c in catalysts} | present
        for reaction in self.catalog:
            if not all(r in present for r in reaction.reactant_ids):
                continue
            if temperature >= reaction.effective_temperature(catalyst_ids):
                return reaction
        return None

    def detect_reaction(self, chemicals, temperature=20, catalysts=()):
        self.check_safety(chemicals, temperature)
        return self.match(chemicals, temperature, catalysts)

    def perform_reaction(self, chemicals, temperature=20, catalyst=None):
        catalysts = (catalyst,) if catalyst else ()
        reaction = self.detect_reaction(chemicals, temperature, catalysts)
        if reaction is not None:
            self.record(reaction)
        return reaction

    def record(self, reaction):
        self.active_reactions.append(reaction)
        self.reaction_history.append(reaction)
        self.log_insights(reaction)

    def reset(self):
        self._alerts.clear()
        self.active_reactions.clear()
        self.reaction_history.clear()

    # ── Catalog queries ──────────────────────────────────────────────────────
    def reactions_by_type(self, reaction_type):
        return [r for r in self.catalog if r.type == reaction_type]

    @staticmethod
    def insights(reaction):
        return {
            "description": reaction.description,
            "mechanism":   " → ".join(reaction.mechanism),
            "safety":      ", ".join(reaction.safety_warnings),
            "notes":       list(reaction.educational_notes),
        }

    def log_insights(self, reaction):
        info = self.insights(reaction)
        logger.info("Educational insight: %s", info["description"])
        if info["mechanism"]:
            logger.info("Mechanism: %s", info["mechanism"])
        logger.info("Safety: %s", info["safety"])

    @staticmethod
    def predict_product_properties(reaction, temperature=20, pressure=1.0):
        # Display hints only; no thermodynamic model behind these numbers.
        state = "gas" if reaction.gas_evolution and temperature >= 100 else "liquid"
        if reaction.precipitate_formed:
            state = "suspension"
        return {
            "state":        state,
            "color":        reaction.color_change.end if reaction.color_change else "#FFFFFF",
            "density":      1.0,
            "boiling_point": 100,
            "pressure":     pressure,
            "stability":    "unstable" if reaction.danger_level in ("high", "extreme") else "stable",
        }
