import logging

from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .models import Feedback
from api_responses import ok, fail, read_json, parse_id
from token_decorators import require_admin

logger = logging.getLogger(__name__)


def _rating(value):
    if isinstance(value, bool):
        return None
    try:
        rating = int(value)
    except (TypeError, ValueError):
        return None
    return rating if 1 <= rating <= 5 else None


# GET  /api/feedback
# POST /api/feedback
@csrf_exempt
@require_http_methods(['GET', 'POST'])
def feedback(request):
    if request.method == 'POST':
        return submit_feedback(request)
    return list_feedback(request)


def submit_feedback(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    message = str(data.get('message') or '').strip()
    if not message:
        return fail('Feedback message is required', 'MISSING_MESSAGE', 400)

    rating = _rating(data.get('rating'))
    if rating is None:
        return fail('Rating must be between 1 and 5', 'INVALID_RATING', 400)

    entry = Feedback.objects.create(
        name=str(data.get('name') or '').strip() or 'Anonymous',
        email=str(data.get('email') or '').strip() or None,
        rating=rating,
        category=data.get('category') or 'general',
        message=message,
    )
    logger.info('Feedback %s received (rating %s)', entry.id, rating)
    return ok(message='Thank you for your feedback!', feedback=entry.to_dict(), status=201)


@require_admin
def list_feedback(request):
    entries = Feedback.objects.order_by('-created_at', '-id')
    return ok([e.to_dict() for e in entries])


# DELETE /api/feedback/<id>
@csrf_exempt
@require_http_methods(['DELETE'])
@require_admin
def delete_feedback(request, feedback_id):
    fid = parse_id(feedback_id)
    if fid is None:
        return fail('Invalid feedback ID format', 'INVALID_ID', 400)
    deleted, _ = Feedback.objects.filter(id=fid).delete()
    if not deleted:
        return fail('Feedback not found', 'NOT_FOUND', 404)
    return ok(message='Feedback deleted successfully')
