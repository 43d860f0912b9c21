import logging

from django.contrib.auth.hashers import make_password
from django.db import IntegrityError
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .models import User
from api_responses import ok, fail, read_json
from token_decorators import issue_token, require_token, ADMIN, CUSTOMER

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


# Admin login
@csrf_exempt
@require_http_methods(['POST'])
def admin_login(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    identifier = str(data.get('email') or data.get('username') or '').strip().lower()
    password = str(data.get('password') or '')
    if not identifier or not password:
        return fail('Please provide email and password', 'MISSING_CREDENTIALS', 400)

    user = (User.objects.filter(email__iexact=identifier).first()
            or User.objects.filter(username__iexact=identifier).first())

    if user is None or not user.check_password(password) or user.usertype != ADMIN:
        logger.warning('Failed admin login for %s', identifier)
        return fail('Invalid credentials', 'INVALID_CREDENTIALS', 401)

    return ok(token=issue_token(user), admin={'id': user.id, 'username': user.username, 'email': user.email})


# Customer signup
@csrf_exempt
@require_http_methods(['POST'])
def user_signup(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    email = str(data.get('email') or '').strip().lower()
    password = str(data.get('password') or '')
    full_name = str(data.get('fullName') or '').strip()

    if not email or not password or not full_name:
        return fail('Please provide fullName, email and password', 'VALIDATION_ERROR', 400)
    if len(password) < MIN_PASSWORD_LENGTH:
        return fail(f'Password must be at least {MIN_PASSWORD_LENGTH} characters', 'VALIDATION_ERROR', 400)
    if User.objects.filter(email__iexact=email).exists():
        return fail('An account with this email already exists', 'USER_EXISTS', 400)

    try:
        user = User.objects.create(
            username=email.split('@')[0],
            email=email,
            password=make_password(password),
            full_name=full_name,
            phone=str(data.get('phone') or '').strip(),
            address=str(data.get('address') or '').strip(),
            usertype=CUSTOMER,
        )
    except IntegrityError:
        return fail('An account with this email already exists', 'USER_EXISTS', 400)

    logger.info('New customer signup %s', user.id)
    return ok(status=201, token=issue_token(user), user=user.to_dict())


# Customer login
@csrf_exempt
@require_http_methods(['POST'])
def user_login(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    email = str(data.get('email') or '').strip().lower()
    password = str(data.get('password') or '')
    if not email or not password:
        return fail('Please provide email and password', 'MISSING_CREDENTIALS', 400)

    user = User.objects.filter(email__iexact=email).first()
    if user is None or not user.check_password(password):
        return fail('Invalid credentials', 'INVALID_CREDENTIALS', 401)

    return ok(token=issue_token(user), user=user.to_dict())


# Update profile of the token's user
@csrf_exempt
@require_http_methods(['PUT'])
@require_token
def update_user_info(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    user = request.account
    if 'fullName' in data:
        full_name = str(data.get('fullName') or '').strip()
        if not full_name:
            return fail('fullName cannot be empty', 'VALIDATION_ERROR', 400)
        user.full_name = full_name
    if 'phone' in data:
        user.phone = str(data.get('phone') or '').strip()
    if 'address' in data:
        user.address = str(data.get('address') or '').strip()
    user.save()

    return ok(user=user.to_dict())


@csrf_exempt
@require_http_methods(['POST'])
@require_token
def verify_token(request):
    return ok(request.account.to_dict())
