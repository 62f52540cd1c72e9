# backend/lab/views.py

import json
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from rest_framework import generics

from accounts.auth import current_user_id, session_key

from . import autosave, chemicals, registry
from .catalog import REACTION_CATALOG, REACTION_TYPES
from .exceptions import LabError
from .models import Chemical, Experiment, Lesson
from .serializers import ChemicalSerializer, ExperimentSerializer, LessonSerializer

DEFAULT_VOLUME = 5.0


# ── Helpers ───────────────────────────────────────────────────────────────────
def _owner(request):
    user_id = current_user_id(request)
    if user_id:
        return registry.owner_for(user_id=user_id)
    return registry.owner_for(session_key=session_key(request))


def _json_body(request):
    if not request.body:
        return {}
    data = json.loads(request.body)
    if not isinstance(data, dict):
        raise LabError("Expected a JSON object.")
    return data


def lab_action(view):
    """Run a lab action and turn rejected input into a JSON error response."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except json.JSONDecodeError:
            return JsonResponse({"error": "Invalid JSON."}, status=400)
        except LabError as exc:
            return JsonResponse({"error": exc.message}, status=exc.status)
    return wrapper


def _respond(owner, session, message, status=200, **extra):
    registry.persist(owner)
    return JsonResponse({"message": message, **extra, "state": session.to_state()}, status=status)


def _save_response(owner, session, result):
    if result.ok:
        return _respond(owner, session, "Your lab session has been recorded successfully.", saved=True)
    return _respond(owner, session, result.message, status=502, saved=False, error=result.message)


# ── Experiment lifecycle ──────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def start_experiment_view(request):
    owner   = _owner(request)
    session = registry.get_session(owner)
    session.start()
    autosave.start_autosave()
    return _respond(owner, session, "Experiment started.")


@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def pause_experiment_view(request):
    owner   = _owner(request)
    session = registry.get_session(owner)
    session.pause()
    return _respond(owner, session, "Experiment paused.")


@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def resume_experiment_view(request):
    owner   = _owner(request)
    session = registry.get_session(owner)
    session.resume()
    return _respond(owner, session, "Experiment resumed.")


@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def complete_experiment_view(request):
    owner   = _owner(request)
    session = registry.get_session(owner)
    result  = session.complete(current_user_id(request))
    if result is None:
        return _respond(owner, session, "Experiment completed.")
    return _save_response(owner, session, result)


@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def reset_lab_view(request):
    owner   = _owner(request)
    session = registry.get_session(owner)
    session.reset()
    return _respond(owner, session, "All equipment and reactions have been cleared.")


@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def save_experiment_view(request):
    owner   = _owner(request)
    session = registry.get_session(owner)
    result  = session.save(current_user_id(request))
    return _save_response(owner, session, result)


@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def auto_save_view(request):
    data    = _json_body(request)
    owner   = _owner(request)
    session = registry.get_session(owner)
    session.set_auto_save(data.get("enabled", True))
    state = "enabled" if session.auto_save_enabled else "disabled"
    return _respond(owner, session, f"Auto-save {state}.")


@require_http_methods(["GET"])
def lab_state_view(request):
    session = registry.get_session(_owner(request))
    return JsonResponse({"state": session.to_state()})


# ── Workbench ─────────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def place_equipment_view(request):
    data      = _json_body(request)
    owner     = _owner(request)
    session   = registry.get_session(owner)
    equipment = session.place_equipment(data.get("type", ""), data.get("position", (0, 0, 0)))
    return _respond(owner, session, f"{equipment.type} has been placed on the workbench.",
                    status=201, equipment=equipment.to_dict())


@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def add_chemical_view(request, equipment_id):
    data     = _json_body(request)
    owner    = _owner(request)
    session  = registry.get_session(owner)
    chemical = data.get("chemical") or {"name": data.get("name"), "color": data.get("color")}
    before   = len(session.safety_alerts)

    record    = session.add_chemical(equipment_id, chemical, data.get("volume", DEFAULT_VOLUME))
    equipment = session.get_equipment(equipment_id)
    alerts    = [a.to_dict() for a in session.safety_alerts[before:]]
    name      = equipment.contents[-1]
    message   = (f"{record.name} detected! +{record.points} points" if record
                 else f"{name} added to equipment successfully.")
    return _respond(owner, session, message,
                    equipment=equipment.to_dict(),
                    reaction=record.to_dict() if record else None,
                    alerts=alerts)


@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def heat_equipment_view(request, equipment_id):
    data    = _json_body(request)
    if "temperature" not in data:
        raise LabError("A temperature is required.")
    owner   = _owner(request)
    session = registry.get_session(owner)
    before  = len(session.safety_alerts)

    record    = session.heat(equipment_id, data["temperature"])
    equipment = session.get_equipment(equipment_id)
    alerts    = [a.to_dict() for a in session.safety_alerts[before:]]
    return _respond(owner, session, f"{equipment.id} is now at {equipment.temperature:g}°C.",
                    equipment=equipment.to_dict(),
                    reaction=record.to_dict() if record else None,
                    alerts=alerts)


@csrf_exempt
@require_http_methods(["POST"])
@lab_action
def change_volume_view(request, equipment_id):
    data      = _json_body(request)
    owner     = _owner(request)
    session   = registry.get_session(owner)
    equipment = session.change_volume(equipment_id, data.get("index", 0), data.get("volume"))
    return _respond(owner, session, "Volume updated.", equipment=equipment.to_dict())


# ── Safety alerts ─────────────────────────────────────────────────────────────

@csrf_exempt
@require_http_methods(["GET", "DELETE"])
def alerts_view(request):
    owner   = _owner(request)
    session = registry.get_session(owner)
    if request.method == "DELETE":
        session.clear_safety_alerts()
        return JsonResponse({"message": "Safety alerts cleared.", "alerts": []})
    return JsonResponse({"alerts": [a.to_dict() for a in session.safety_alerts]})


# ── Catalog and library ───────────────────────────────────────────────────────

@require_http_methods(["GET"])
def catalog_view(request):
    reaction_type = request.GET.get("type")
    if reaction_type and reaction_type not in REACTION_TYPES:
        return JsonResponse({"error": "Unknown reaction type."}, status=400)
    reactions = [r for r in REACTION_CATALOG if not reaction_type or r.type == reaction_type]
    return JsonResponse({"reactions": [r.to_dict() for r in reactions]})


@require_http_methods(["GET"])
def library_view(request):
    category = request.GET.get("category")
    if category and category != "all" and category not in chemicals.CATEGORIES:
        return JsonResponse({"error": "Unknown category."}, status=400)
    payload = chemicals.library(category=category, search=request.GET.get("search"))
    return JsonResponse({"chemicals": payload})


# ── CRUD resources ────────────────────────────────────────────────────────────

class ChemicalListCreateView(generics.ListCreateAPIView):
    queryset = Chemical.objects.all()
    serializer_class = ChemicalSerializer


class LessonListCreateView(generics.ListCreateAPIView):
    queryset = Lesson.objects.all()
    serializer_class = LessonSerializer


class ExperimentListCreateView(generics.ListCreateAPIView):
    serializer_class = ExperimentSerializer

    def get_queryset(self):
        queryset = Experiment.objects.all()
        user_id = self.request.query_params.get("user_id")
        if user_id:
            queryset = queryset.filter(user_id=user_id)
        return queryset
