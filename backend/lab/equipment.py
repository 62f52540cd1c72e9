# backend/lab/equipment.py

import math
from dataclasses import dataclass, field, asdict
from typing import List, Optional

from .chemicals import color_of, ph_of
from .colors import BASE_LIQUID, is_hex_color, mix_colors, weighted_ph
from .exceptions import InvalidColor, InvalidVolume

MIXING_PROGRESS   = 0.4
REACTION_PROGRESS = 1.0


def _check_volume(volume):
    try:
        volume = float(volume)
    except (TypeError, ValueError):
        raise InvalidVolume("Volume must be a number of millilitres.")
    if not math.isfinite(volume):
        raise InvalidVolume("Volume must be a finite number of millilitres.")
    if volume <= 0:
        raise InvalidVolume("Volume must be greater than zero.")
    return volume


def _check_color(color):
    if not color:
        return None
    if not is_hex_color(color):
        raise InvalidColor(f"{color!r} is not a hex color such as #87CEEB.")
    return color


@dataclass
class ChemicalPortion:
    name: str
    volume: float
    color: str


@dataclass
class Equipment:
    id: str
    type: str
    position: List[float]
    contents: List[str] = field(default_factory=list)
    chemical_objects: List[ChemicalPortion] = field(default_factory=list)
    total_volume: float = 0.0
    temperature: float = 20.0
    is_heated: bool = False
    ph: float = 7.0
    reaction_type: Optional[str] = None
    reaction_progress: float = 0.0
    color: str = BASE_LIQUID
    # reaction ids already scored in this container
    awarded_reactions: List[str] = field(default_factory=list)

    def add_portion(self, name, volume, color=None):
        volume  = _check_volume(volume)
        color   = _check_color(color)
        portion = ChemicalPortion(name=name, volume=volume, color=color or color_of(name))
        self.chemical_objects.append(portion)
        self.contents.append(name)
        self._recompute_volume()
        return portion

    def change_volume(self, index, volume):
        volume = _check_volume(volume)
        try:
            portion = self.chemical_objects[int(index)]
        except (IndexError, TypeError, ValueError):
            raise InvalidVolume(f"No chemical at position {index} in {self.id}.")
        portion.volume = volume
        self._recompute_volume()
        return portion

    def _recompute_volume(self):
        self.total_volume = round(sum(p.volume for p in self.chemical_objects), 6)

    def set_temperature(self, temperature, ambient=20.0):
        self.temperature = float(temperature)
        self.is_heated   = self.temperature > ambient

    def refresh(self, reaction=None):
        """Recompute the display state the renderer reads (pH, color, progress)."""
        volumes = [p.volume for p in self.chemical_objects]
        if reaction is not None and reaction.type == "acid_base":
            self.ph = 7.0
        else:
            self.ph = weighted_ph([ph_of(p.name) for p in self.chemical_objects], volumes)

        if reaction is not None and reaction.color_change is not None:
            self.color = reaction.color_change.end
        else:
            self.color = mix_colors([p.color for p in self.chemical_objects], self.temperature)

        if reaction is not None:
            self.reaction_type     = reaction.name
            self.reaction_progress = REACTION_PROGRESS
        elif len(self.contents) >= 2:
            self.reaction_type     = "Chemical Mixing"
            self.reaction_progress = MIXING_PROGRESS
        else:
            self.reaction_type     = None
            self.reaction_progress = 0.0

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        data = dict(data)
        data["chemical_objects"] = [ChemicalPortion(**p) for p in data.get("chemical_objects", [])]
        return cls(**data)
