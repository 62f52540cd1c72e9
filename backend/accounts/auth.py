# backend/accounts/auth.py
#
# All the lab needs from authentication: is someone signed in, and an opaque
# identifier for them.


def current_user_id(request):
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return str(user.pk)
    return None


def session_key(request):
    """Django session key, creating the session on first use."""
    if not request.session.session_key:
        # modified, so SessionMiddleware sends the cookie back
        request.session["lab_guest"] = True
        request.session.save()
    return request.session.session_key
