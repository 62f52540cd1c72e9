# backend/lab/serializers.py

from rest_framework import serializers

from .models import Chemical, Experiment, Lesson


class ChemicalSerializer(serializers.ModelSerializer):
    class Meta:
        model = Chemical
        fields = "__all__"


class LessonSerializer(serializers.ModelSerializer):
    class Meta:
        model = Lesson
        fields = "__all__"
        read_only_fields = ["created_at"]


class ExperimentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Experiment
        fields = ["id", "user_id", "experiment_name", "chemicals_used", "results", "score", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_score(self, value):
        if value < 0:
            raise serializers.ValidationError("Score cannot be negative.")
        return value

    def validate_chemicals_used(self, value):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise serializers.ValidationError("chemicals_used must be a list of names.")
        return value
