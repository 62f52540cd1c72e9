from django.urls import path
from . import views

urlpatterns = [
    # lab session
    path("lab/start/",     views.start_experiment_view,    name="start_experiment"),
    path("lab/pause/",     views.pause_experiment_view,    name="pause_experiment"),
    path("lab/resume/",    views.resume_experiment_view,   name="resume_experiment"),
    path("lab/complete/",  views.complete_experiment_view, name="complete_experiment"),
    path("lab/reset/",     views.reset_lab_view,           name="reset_lab"),
    path("lab/save/",      views.save_experiment_view,     name="save_experiment"),
    path("lab/auto-save/", views.auto_save_view,           name="auto_save"),
    path("lab/state/",     views.lab_state_view,           name="lab_state"),
    path("lab/alerts/",    views.alerts_view,              name="safety_alerts"),
    path("lab/catalog/",   views.catalog_view,             name="reaction_catalog"),
    path("lab/library/",   views.library_view,             name="chemical_library"),

    # workbench
    path("lab/equipment/",                             views.place_equipment_view, name="place_equipment"),
    path("lab/equipment/<str:equipment_id>/chemicals/", views.add_chemical_view,    name="add_chemical"),
    path("lab/equipment/<str:equipment_id>/heat/",      views.heat_equipment_view,  name="heat_equipment"),
    path("lab/equipment/<str:equipment_id>/volume/",    views.change_volume_view,   name="change_volume"),

    # CRUD
    path("chemicals/",   views.ChemicalListCreateView.as_view(),   name="chemicals"),
    path("lessons/",     views.LessonListCreateView.as_view(),     name="lessons"),
    path("experiments/", views.ExperimentListCreateView.as_view(), name="experiments"),
]
