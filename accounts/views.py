import logging

from django.contrib.auth import authenticate
from django.http import JsonResponse

from core import ratelimit
from core.api import api_view, parse_json, raise_for_form
from core.errors import InvalidInputError
from core.recaptcha import verify_recaptcha

from .forms import LoginForm, ProfileForm, SignUpForm
from .tokens import create_access_token


logger = logging.getLogger(__name__)


def serialize_user(user) -> dict:
    # jamais le hash du mot de passe
    return {
        "id_inscrit": user.pk,
        "email_inscrit": user.email,
        "nom_inscrit": user.last_name,
        "prenom_inscrit": user.first_name,
        "adresse_inscrit": user.address,
        "telephone_inscrit": user.phone,
        "type_inscrit": user.member_type,
        "date_naissance": user.birth_date.isoformat() if user.birth_date else None,
        "civilite_inscrit": user.civility,
    }


@api_view(["POST"])
def signup(request):
    data = parse_json(request)
    ratelimit.hit(request, "signup")
    verify_recaptcha(data.get("recaptchaToken") or "", ratelimit.client_ip(request))

    form = SignUpForm(data)
    raise_for_form(form)
    user = form.save()
    logger.info("Member %s signed up", user.pk)

    return JsonResponse({"user": serialize_user(user), "token": create_access_token(user)}, status=201)


@api_view(["POST"])
def login(request):
    data = parse_json(request)
    ratelimit.hit(request, "login")
    verify_recaptcha(data.get("recaptchaToken") or "", ratelimit.client_ip(request))

    form = LoginForm(data)
    raise_for_form(form)
    user = authenticate(
        request,
        username=form.cleaned_data["email_inscrit"],
        password=form.cleaned_data["mdp_inscrit"],
    )
    if user is None:
        raise InvalidInputError("Email ou mot de passe incorrect", field="email_inscrit")

    return JsonResponse(
        {"message": "Connexion réussie", "user": serialize_user(user), "token": create_access_token(user)}
    )


@api_view(["GET", "PUT"], auth=True)
def profile(request):
    if request.method == "GET":
        return JsonResponse({"message": "Profil récupéré avec succès", "user": serialize_user(request.member)})

    data = parse_json(request)
    verify_recaptcha(data.get("recaptchaToken") or "", ratelimit.client_ip(request))

    form = ProfileForm(data, user=request.member)
    raise_for_form(form)
    user = form.save()
    return JsonResponse({"message": "Profil mis à jour avec succès", "user": serialize_user(user)})
