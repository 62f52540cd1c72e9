# backend/lab/safety.py

import itertools
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

from .chemicals import CATEGORIES, canonical_id, category_of

ALERT_LEVELS = ("warning", "danger", "critical")

ACTION_SEPARATE = "STOP: Separate chemicals immediately"
ACTION_COOL     = "Reduce temperature immediately"
ACTION_EVACUATE = "EVACUATE: Fire hazard imminent"


@dataclass(frozen=True)
class IncompatibilityRule:
    """Chemicals that must never share a container.

    A member is either a chemical name/formula or a category such as
    ``"organic"``, which matches any present chemical of that category.
    """
    members: Tuple[str, ...]
    warning: str


@dataclass(frozen=True)
class TemperatureLimit:
    chemical: str
    warning: str
    max: Optional[float] = None
    ignition: Optional[float] = None


@dataclass
class SafetyAlert:
    id: str
    level: str
    message: str
    action: str
    chemical: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        return {
            "id":        self.id,
            "level":     self.level,
            "message":   self.message,
            "chemical":  self.chemical,
            "action":    self.action,
            "timestamp": self.timestamp.isoformat(),
        }


# ── Rule set ──────────────────────────────────────────────────────────────────
INCOMPATIBLE_COMBINATIONS = (
    IncompatibilityRule(("H₂SO₄", "organic"), "DANGER: Sulfuric acid can cause explosive reactions with organic compounds"),
    IncompatibilityRule(("HCl", "H₂SO₄"),     "CAUTION: Mixing acids can cause violent reactions"),
    IncompatibilityRule(("Mg", "H₂SO₄"),      "EXTREME DANGER: Produces toxic SO₂ gas and extreme heat"),
    IncompatibilityRule(("Na", "H₂O"),        "DANGER: Sodium reacts violently with water and may ignite the hydrogen released"),
    IncompatibilityRule(("KMnO₄", "organic"), "DANGER: Permanganate can ignite organic material"),
)

TEMPERATURE_LIMITS = (
    TemperatureLimit("H₂SO₄",   "Sulfuric acid becomes more reactive at high temperatures", max=80),
    TemperatureLimit("HCl",     "HCl vapor pressure increases rapidly with temperature", max=85),
    TemperatureLimit("Mg",      "Magnesium ignites at high temperatures", ignition=650),
    TemperatureLimit("C₂H₅OH",  "Ethanol vapour is highly flammable", max=60, ignition=363),
    TemperatureLimit("H₂O₂",    "Hydrogen peroxide decomposes violently when hot", max=70),
)

_sequence = itertools.count(1)


def _alert_id(prefix):
    # unique per process even when two alerts share a millisecond
    return f"{prefix}_{int(time.time() * 1000)}_{next(_sequence)}"


def _member_present(member, present_ids):
    if member in CATEGORIES:
        return any(category_of(chem_id) == member for chem_id in present_ids)
    return canonical_id(member) in present_ids


def check_incompatibilities(present_ids, rules=INCOMPATIBLE_COMBINATIONS):
    alerts = []
    for rule in rules:
        if all(_member_present(m, present_ids) for m in rule.members):
            alerts.append(SafetyAlert(
                id=_alert_id("incompatible"),
                level="critical",
                message=rule.warning,
                action=ACTION_SEPARATE,
            ))
    return alerts


def check_temperature_limits(present_ids, temperature, limits=TEMPERATURE_LIMITS):
    alerts = []
    for chem_id in present_ids:
        for limit in limits:
            if canonical_id(limit.chemical) != chem_id:
                continue
            if limit.max is not None and temperature > limit.max:
                alerts.append(SafetyAlert(
                    id=_alert_id(f"temp_{chem_id}"),
                    level="danger",
                    message=limit.warning,
                    chemical=limit.chemical,
                    action=ACTION_COOL,
                ))
            if limit.ignition is not None and temperature > limit.ignition:
                alerts.append(SafetyAlert(
                    id=_alert_id(f"ignition_{chem_id}"),
                    level="critical",
                    message=f"{limit.chemical} ignition temperature exceeded!",
                    chemical=limit.chemical,
                    action=ACTION_EVACUATE,
                ))
    return alerts


def check_safety(chemicals, temperature):
    """Both passes always run; incompatibility alerts come first."""
    present_ids = list(dict.fromkeys(canonical_id(c) for c in chemicals))
    return check_incompatibilities(present_ids) + check_temperature_limits(present_ids, temperature)
