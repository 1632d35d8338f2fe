import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('backend.core')


def api_exception_handler(exc, context):
    """
    Normalise framework errors into the {'error': ...} shape used by the views.

    Field-level validation errors keep DRF's field map so forms can show them.
    Anything DRF does not handle is logged and answered with a generic 500.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            f"Unhandled exception in {view.__class__.__name__ if view else 'view'}: {str(exc)}",
            exc_info=True
        )
        return Response(
            {'error': 'An unexpected error occurred'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    data = response.data
    if isinstance(data, dict) and 'detail' in data and 'error' not in data:
        response.data = {'error': str(data['detail'])}
        if 'code' in data:
            response.data['code'] = data['code']
    elif isinstance(data, list):
        response.data = {'error': ' '.join(str(item) for item in data)}

    return response
