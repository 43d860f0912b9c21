import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .monitor import monitor
from api_responses import ok, fail, read_json

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# GET /
@require_http_methods(['GET'])
def welcome(request):
    return JsonResponse({
        'message': 'Welcome to Eat Hub API',
        'version': VERSION,
        'endpoints': {
            'menu': '/api/menu',
            'orders': '/api/orders',
            'categories': '/api/categories',
            'vouchers': '/api/vouchers',
            'rewards': '/api/rewards',
            'feedback': '/api/feedback',
            'auth': '/api/auth',
            'health': '/api/monitoring/health',
        },
    })


# GET /api/monitoring/health
@require_http_methods(['GET'])
def health(request):
    report = monitor.health_check()
    return JsonResponse(report, status=200 if report['status'] == 'healthy' else 503)


# GET /api/monitoring/metrics
@require_http_methods(['GET'])
def metrics(request):
    return JsonResponse(monitor.metrics())


# GET /api/monitoring/status
@require_http_methods(['GET'])
def status(request):
    report = monitor.health_check()
    report.update({
        'metrics': monitor.metrics(),
        'environment': 'development' if settings.DEBUG else 'production',
        'version': VERSION,
    })
    return JsonResponse(report)


# POST /api/monitoring/error
@csrf_exempt
@require_http_methods(['POST'])
def frontend_error(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)
    monitor.track_error()
    logger.error('Frontend error: %s', data)
    return ok()
