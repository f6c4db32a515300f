import logging

from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', type(view).__name__ if view is not None else 'view', exc_info=exc)
        return None

    if isinstance(response.data, dict):
        response.data['status_code'] = response.status_code
        response.data['detail'] = str(getattr(exc, 'detail', exc))

    return response
