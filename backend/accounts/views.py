# backend/accounts/views.py

import json
import logging

from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.models import User
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .auth import current_user_id

logger = logging.getLogger(__name__)


def _user_payload(user):
    return {"user_id": str(user.pk), "username": user.username, "email": user.email}


@csrf_exempt
@require_http_methods(["POST"])
def register_view(request):
    try:
        data = json.loads(request.body)
    except json.JSONDecodeError:
        return JsonResponse({"error": "Invalid JSON."}, status=400)

    username = data.get("username", "").strip()
    email    = data.get("email", "").strip()
    password = data.get("password", "")

    if not username or not password:
        return JsonResponse({"error": "Username and password are required."}, status=400)
    if User.objects.filter(username=username).exists():
        return JsonResponse({"error": "Username already taken."}, status=400)
    if email and User.objects.filter(email=email).exists():
        return JsonResponse({"error": "Email already registered."}, status=400)

    user = User.objects.create_user(username=username, email=email, password=password)
    logger.info("Registered lab user %s", user.username)
    return JsonResponse({"message": "Registration successful.", **_user_payload(user)}, status=201)


@csrf_exempt
@require_http_methods(["POST"])
def login_view(request):
    try:
        data = json.loads(request.body)
    except json.JSONDecodeError:
        return JsonResponse({"error": "Invalid JSON."}, status=400)

    username = data.get("username", "").strip()
    password = data.get("password", "")
    if not username or not password:
        return JsonResponse({"error": "Username and password are required."}, status=400)

    user = authenticate(request, username=username, password=password)
    if user is None:
        return JsonResponse({"error": "Invalid credentials."}, status=401)

    login(request, user)
    return JsonResponse({"message": "Login successful.", **_user_payload(user)})


@csrf_exempt
@require_http_methods(["POST"])
def logout_view(request):
    logout(request)
    return JsonResponse({"message": "Logged out successfully."})


@require_http_methods(["GET"])
def check_session_view(request):
    user_id = current_user_id(request)
    if user_id is None:
        return JsonResponse({"is_authenticated": False, "user_id": None, "username": None, "email": None})
    return JsonResponse({"is_authenticated": True, **_user_payload(request.user)})
