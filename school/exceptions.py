import logging

from rest_framework.views import exception_handler

from academics.exceptions import error_message

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """Render API errors as ``{success: false, error, status_code, detail}``."""
    response = exception_handler(exc, context)

    if response is not None:
        detail = response.data
        body = {
            'success': False,
            'error': error_message(detail),
            'status_code': response.status_code,
            'detail': str(exc),
        }
        if isinstance(detail, dict) and set(detail) - {'detail'}:
            body['errors'] = detail
        response.data = body
        if response.status_code >= 500:
            logger.error('API error in %s: %s', context.get('view').__class__.__name__, body['error'])
    else:
        view = context.get('view')
        logger.exception('Unhandled error in %s', view.__class__.__name__ if view else 'unknown view')

    return response
