# backend/lab/scoring.py

import logging

logger = logging.getLogger(__name__)


class ScoreLedger:
    """Running score and badge set for one lab session.

    Owned by a single ``LabSession``; nothing else mutates it.
    """

    def __init__(self, score=0, badges=()):
        self.score  = int(score)
        self._badges = list(dict.fromkeys(badges))

    @property
    def badges(self):
        return tuple(self._badges)

    def award(self, points, reason=None):
        self.score += points
        if reason:
            logger.info("Awarded %s points: %s", points, reason)
        return self.score

    def award_badge(self, badge):
        if badge in self._badges:
            return False
        self._badges.append(badge)
        logger.info("Badge earned: %s", badge)
        return True

    def reset(self):
        self.score   = 0
        self._badges = []

    def to_dict(self):
        return {"score": self.score, "badges": list(self._badges)}

    @classmethod
    def from_dict(cls, data):
        return cls(score=data.get("score", 0), badges=data.get("badges", ()))
