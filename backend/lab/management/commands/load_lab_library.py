from django.core.management.base import BaseCommand

from lab.catalog import REACTION_CATALOG
from lab.chemicals import CHEMICALS, EXPERIMENT_TEMPLATES, canonical_id
from lab.models import Chemical, Lesson


def _reacts_with(chem_id):
    partners = []
    for reaction in REACTION_CATALOG:
        if chem_id in reaction.reactant_ids:
            partners.extend(r for r in reaction.reactant_ids if r != chem_id)
    return [CHEMICALS[p]["label"] if p in CHEMICALS else p for p in dict.fromkeys(partners)]


class Command(BaseCommand):
    help = "Load the built-in chemical registry and experiment templates into the database."

    def handle(self, *args, **options):
        chemicals = 0
        for chem_id, meta in CHEMICALS.items():
            _, created = Chemical.objects.update_or_create(
                name=meta["label"],
                defaults={
                    "formula":      meta["formula"],
                    "color":        meta["color"],
                    "state":        meta["state"],
                    "danger_level": meta["danger_level"],
                    "category":     meta["category"],
                    "molar_mass":   meta["molar_mass"],
                    "ph":           meta["ph"],
                    "hazards":      meta["hazards"],
                    "reacts_with":  _reacts_with(chem_id),
                },
            )
            chemicals += created

        lessons = 0
        for template in EXPERIMENT_TEMPLATES:
            _, created = Lesson.objects.update_or_create(
                title=template["title"],
                defaults={
                    "chemicals":       [canonical_id(c) for c in template["chemicals"]],
                    "procedure":       template["procedure"],
                    "expected_result": template["expected_result"],
                    "difficulty":      template["difficulty"],
                },
            )
            lessons += created

        self.stdout.write(self.style.SUCCESS(
            f"Loaded {len(CHEMICALS)} chemicals ({chemicals} new) and "
            f"{len(EXPERIMENT_TEMPLATES)} lessons ({lessons} new)."
        ))
