# backend/lab/persistence.py

import logging

from django.db import DatabaseError

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)


class ExperimentStore:
    """Write-only boundary to wherever finished lab sessions are kept."""

    def save(self, record):
        raise NotImplementedError


class DjangoExperimentStore(ExperimentStore):
    def save(self, record):
        from .models import Experiment

        try:
            experiment = Experiment.objects.create(
                user_id=record["user_id"],
                experiment_name=record["experiment_name"],
                chemicals_used=record["chemicals_used"],
                results=record["results"],
                score=record["score"],
            )
        except DatabaseError as exc:
            raise PersistenceError(str(exc)) from exc
        logger.info("Saved experiment %s for user %s", experiment.pk, record["user_id"])
        return experiment
