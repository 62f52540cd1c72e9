from django.urls import path
from . import views

urlpatterns = [
    path("register/", views.register_view,      name="register"),
    path("login/",    views.login_view,         name="login"),
    path("logout/",   views.logout_view,        name="logout"),
    path("session/",  views.check_session_view, name="check_session"),
]
