from django import forms
from django.contrib.auth import password_validation
from django.db import IntegrityError, transaction

from core.errors import ConflictError

from .backends import normalize_email
from .models import User


def email_conflicts(email: str, *, exclude_user_id=None) -> bool:
    if not email:
        return False
    qs = User.objects.filter(email__iexact=email)
    if exclude_user_id:
        qs = qs.exclude(pk=exclude_user_id)
    return qs.exists()


EMAIL_TAKEN = "Cet email est déjà utilisé"


def save_member(user: User, **kwargs) -> None:
    """Save under the unique username (the email); a duplicate becomes a ConflictError."""
    try:
        with transaction.atomic():
            user.save(**kwargs)
    except IntegrityError:
        raise ConflictError(EMAIL_TAKEN)


class SignUpForm(forms.Form):
    """Payload of POST /auth/signup/ (field names follow the web client)."""

    email_inscrit = forms.EmailField(max_length=150, error_messages={"invalid": "Email invalide"})
    mdp_inscrit = forms.CharField(min_length=12, error_messages={"min_length": "Mot de passe trop court"})
    nom_inscrit = forms.CharField(max_length=150, required=False)
    prenom_inscrit = forms.CharField(max_length=150, required=False)
    adresse_inscrit = forms.CharField(max_length=255, required=False)
    telephone_inscrit = forms.CharField(max_length=32, required=False)
    type_inscrit = forms.CharField(max_length=32, required=False)
    date_naissance = forms.DateField(required=False, input_formats=["%Y-%m-%d", "%d/%m/%Y"])
    civilite_inscrit = forms.ChoiceField(choices=[("", "")] + User.Civility.choices, required=False)

    def clean_email_inscrit(self):
        return normalize_email(self.cleaned_data.get("email_inscrit"))

    def clean_mdp_inscrit(self):
        password = self.cleaned_data.get("mdp_inscrit") or ""
        password_validation.validate_password(password)
        return password

    def save(self) -> User:
        data = self.cleaned_data
        if email_conflicts(data["email_inscrit"]):
            raise ConflictError(EMAIL_TAKEN)

        user = User(
            username=data["email_inscrit"],
            email=data["email_inscrit"],
            last_name=data.get("nom_inscrit") or "",
            first_name=data.get("prenom_inscrit") or "",
            address=data.get("adresse_inscrit") or "",
            phone=data.get("telephone_inscrit") or "",
            member_type=data.get("type_inscrit") or "client",
            birth_date=data.get("date_naissance"),
            civility=data.get("civilite_inscrit") or "",
        )
        user.set_password(data["mdp_inscrit"])
        save_member(user)
        return user


class LoginForm(forms.Form):
    email_inscrit = forms.EmailField(error_messages={"invalid": "Email invalide", "required": "Email invalide"})
    mdp_inscrit = forms.CharField(error_messages={"required": "Mot de passe requis"})


class ProfileForm(forms.Form):
    """Partial update of PUT /user/profil/: only provided fields change."""

    civilite = forms.ChoiceField(choices=[("", "")] + User.Civility.choices, required=False)
    name = forms.CharField(max_length=150, required=False)
    firstname = forms.CharField(max_length=150, required=False)
    phone = forms.CharField(max_length=32, required=False)
    email = forms.EmailField(max_length=150, required=False, error_messages={"invalid": "Email invalide"})
    password = forms.CharField(required=False)
    adress = forms.CharField(max_length=255, required=False)

    FIELD_MAP = {
        "civilite": "civility",
        "name": "last_name",
        "firstname": "first_name",
        "phone": "phone",
        "adress": "address",
    }

    def __init__(self, *args, user: User, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = user

    def clean_email(self):
        return normalize_email(self.cleaned_data.get("email"))

    def clean_password(self):
        password = self.cleaned_data.get("password") or ""
        if password:
            password_validation.validate_password(password, self.user)
        return password

    def save(self) -> User:
        user = self.user
        update_fields = []
        for form_field, model_field in self.FIELD_MAP.items():
            value = self.cleaned_data.get(form_field)
            if value:
                setattr(user, model_field, value)
                update_fields.append(model_field)

        email = self.cleaned_data.get("email")
        if email:
            if email_conflicts(email, exclude_user_id=user.pk):
                raise ConflictError(EMAIL_TAKEN)
            user.email = email
            user.username = email
            update_fields.extend(["email", "username"])

        password = self.cleaned_data.get("password")
        if password:
            user.set_password(password)
            update_fields.append("password")

        if update_fields:
            save_member(user, update_fields=update_fields)
        return user
