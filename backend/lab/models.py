# backend/lab/models.py

from django.db import models


class Chemical(models.Model):
    CATEGORY_CHOICES = [(c, c.title()) for c in (
        "acid", "base", "salt", "organic", "metal", "indicator", "solvent", "gas", "oxidizer",
    )]
    STATE_CHOICES  = [("solid", "Solid"), ("liquid", "Liquid"), ("gas", "Gas")]
    DANGER_CHOICES = [("low", "Low"), ("medium", "Medium"), ("high", "High"), ("extreme", "Extreme")]

    name          = models.CharField(max_length=100, unique=True)
    formula       = models.CharField(max_length=50)
    color         = models.CharField(max_length=7, default="#87CEEB")
    state         = models.CharField(max_length=10, choices=STATE_CHOICES, default="liquid")
    danger_level  = models.CharField(max_length=10, choices=DANGER_CHOICES, default="low")
    category      = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    description   = models.TextField(blank=True)
    molar_mass    = models.FloatField(null=True, blank=True)
    density       = models.FloatField(null=True, blank=True)
    boiling_point = models.FloatField(null=True, blank=True)
    melting_point = models.FloatField(null=True, blank=True)
    ph            = models.FloatField(null=True, blank=True)
    concentration = models.CharField(max_length=50, blank=True)
    hazards       = models.JSONField(default=list, blank=True)
    reacts_with   = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.formula})"


class Lesson(models.Model):
    title           = models.CharField(max_length=200, unique=True)
    description     = models.TextField(blank=True)
    difficulty      = models.CharField(max_length=20, default="Beginner")
    chemicals       = models.JSONField(default=list, blank=True)
    procedure       = models.TextField(blank=True)
    expected_result = models.TextField(blank=True)
    created_at      = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.title


class Experiment(models.Model):
    """A saved lab session. Written once per save; never merged or read back by the lab."""

    user_id         = models.CharField(max_length=128, db_index=True)
    experiment_name = models.CharField(max_length=200)
    chemicals_used  = models.JSONField(default=list, blank=True)
    results         = models.JSONField(default=dict, blank=True)
    score           = models.IntegerField(default=0)
    created_at      = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "user_experiments"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.experiment_name} ({self.user_id})"
