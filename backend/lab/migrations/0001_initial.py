from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Chemical",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("formula", models.CharField(max_length=50)),
                ("color", models.CharField(default="#87CEEB", max_length=7)),
                ("state", models.CharField(choices=[("solid", "Solid"), ("liquid", "Liquid"), ("gas", "Gas")], default="liquid", max_length=10)),
                ("danger_level", models.CharField(choices=[("low", "Low"), ("medium", "Medium"), ("high", "High"), ("extreme", "Extreme")], default="low", max_length=10)),
                ("category", models.CharField(choices=[("acid", "Acid"), ("base", "Base"), ("salt", "Salt"), ("organic", "Organic"), ("metal", "Metal"), ("indicator", "Indicator"), ("solvent", "Solvent"), ("gas", "Gas"), ("oxidizer", "Oxidizer")], max_length=20)),
                ("description", models.TextField(blank=True)),
                ("molar_mass", models.FloatField(blank=True, null=True)),
                ("density", models.FloatField(blank=True, null=True)),
                ("boiling_point", models.FloatField(blank=True, null=True)),
                ("melting_point", models.FloatField(blank=True, null=True)),
                ("ph", models.FloatField(blank=True, null=True)),
                ("concentration", models.CharField(blank=True, max_length=50)),
                ("hazards", models.JSONField(blank=True, default=list)),
                ("reacts_with", models.JSONField(blank=True, default=list)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Lesson",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200, unique=True)),
                ("description", models.TextField(blank=True)),
                ("difficulty", models.CharField(default="Beginner", max_length=20)),
                ("chemicals", models.JSONField(blank=True, default=list)),
                ("procedure", models.TextField(blank=True)),
                ("expected_result", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Experiment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.CharField(db_index=True, max_length=128)),
                ("experiment_name", models.CharField(max_length=200)),
                ("chemicals_used", models.JSONField(blank=True, default=list)),
                ("results", models.JSONField(blank=True, default=dict)),
                ("score", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "user_experiments",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
