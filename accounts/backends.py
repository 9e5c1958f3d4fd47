from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class EmailBackend(ModelBackend):
    """Members log in with their e-mail address."""

    def authenticate(self, request, username=None, password=None, **kwargs):
        if password is None:
            return None

        user_model = get_user_model()
        email = normalize_email(username or kwargs.get("email") or "")
        if not email:
            return None

        matched = list(user_model._default_manager.filter(email__iexact=email)[:2])
        if len(matched) != 1:
            return None

        user = matched[0]
        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
