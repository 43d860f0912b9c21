# token_decorators.py
import datetime
from functools import wraps

import jwt
from django.conf import settings

from api_responses import fail

ADMIN = 0
CUSTOMER = 1


def issue_token(user):
    payload = {
        "user_id": user.id,
        "email": user.email,
        "username": user.username,
        "user_type": user.usertype,
        "exp": datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=settings.JWT_EXPIRY_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_token(token):
    return jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])


def _extract_token(request):
    auth = request.META.get("HTTP_AUTHORIZATION", "")
    if auth.startswith("Bearer "):
        return auth.split(" ", 1)[1].strip()
    return None


def has_authorization_header(request):
    """
    Presence check only. The token is not decoded, so any non-empty
    Authorization header counts as an admin caller on the paths that use it.
    """
    return bool(request.META.get("HTTP_AUTHORIZATION", "").strip())


def acting_user_id(request):
    uid = (request.META.get("HTTP_X_USER_ID") or "").strip()
    if not uid or uid == "guest":
        return None
    return uid


def _load_user(claims):
    from user.models import User

    try:
        return User.objects.get(id=claims.get("user_id"))
    except (User.DoesNotExist, ValueError, TypeError):
        return None


def _authenticate(request):
    token = _extract_token(request)
    if not token:
        return None, fail("No token provided. Authorization required.", "NO_TOKEN", 401)
    try:
        claims = decode_token(token)
    except jwt.ExpiredSignatureError:
        return None, fail("Token has expired", "INVALID_TOKEN", 401)
    except jwt.InvalidTokenError:
        return None, fail("Invalid or expired token", "INVALID_TOKEN", 401)

    user = _load_user(claims)
    if user is None:
        return None, fail("Invalid or expired token", "INVALID_TOKEN", 401)

    request.claims = claims
    request.user_id = user.id
    request.user_type = user.usertype
    request.account = user
    return user, None


def require_token(view):
    @wraps(view)
    def _wrapped(request, *args, **kwargs):
        user, error = _authenticate(request)
        if error is not None:
            return error
        return view(request, *args, **kwargs)
    return _wrapped


def require_admin(view):
    @wraps(view)
    def _wrapped(request, *args, **kwargs):
        user, error = _authenticate(request)
        if error is not None:
            return error
        if user.usertype != ADMIN:
            return fail("Admin access required", "ADMIN_REQUIRED", 403)
        request.admin = user
        return view(request, *args, **kwargs)
    return _wrapped
