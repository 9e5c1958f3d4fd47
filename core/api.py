import json
import logging
from functools import wraps

from django.db import InterfaceError, OperationalError
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from accounts.tokens import user_from_request

from .errors import ApiError, InvalidInputError, TransientStoreError


logger = logging.getLogger(__name__)


def json_error(err: ApiError) -> JsonResponse:
    return JsonResponse(err.as_dict(), status=err.status)


def parse_json(request) -> dict:
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise InvalidInputError("Corps JSON invalide")
    if not isinstance(data, dict):
        raise InvalidInputError("Un objet JSON est attendu")
    return data


def api_view(methods=("GET",), *, auth: bool = False):
    """JSON endpoint: method check, optional bearer auth, error mapping.

    With ``auth=True`` the member is available as ``request.member``.
    """
    allowed = {m.upper() for m in methods}

    def decorator(view):
        @csrf_exempt
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if request.method not in allowed:
                return JsonResponse(
                    {"error": "METHOD_NOT_ALLOWED", "message": "Méthode non autorisée", "retryable": False},
                    status=405,
                    headers={"Allow": ", ".join(sorted(allowed))},
                )
            try:
                if auth:
                    request.member = user_from_request(request)
                return view(request, *args, **kwargs)
            except ApiError as e:
                return json_error(e)
            except (OperationalError, InterfaceError):
                logger.exception("Store unavailable on %s %s", request.method, request.path)
                return json_error(TransientStoreError())
            except Exception:
                logger.exception("Unhandled error on %s %s", request.method, request.path)
                raise

        return wrapper

    return decorator


def raise_for_form(form) -> None:
    """Turn the first form error into an InvalidInputError naming the field."""
    if form.is_valid():
        return
    for field, errors in form.errors.items():
        raise InvalidInputError(str(errors[0]), field="" if field == "__all__" else field)
