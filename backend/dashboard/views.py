import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from backend.core.cache_utils import get_cached_dashboard_metrics, cache_dashboard_metrics
from backend.core.permissions import is_admin_user, get_user_project_ids
from backend.leads.models import Lead
from backend.projects.models import Project
from .utils import get_date_range

logger = logging.getLogger('backend.dashboard')

EMPTY_METRICS = {'contacts_added': 0, 'chats_updated': 0, 'visits': 0}


def compute_metrics(project_id, start, end):
    """Lead activity counts for one project inside [start, end)"""
    leads = Lead.objects.filter(project_id=project_id)

    contacts_added = leads.filter(created_at__gte=start, created_at__lt=end).count()

    chats_updated = leads.filter(
        remarks__timestamp__gte=start,
        remarks__timestamp__lt=end,
    ).distinct().count()

    # Status and timestamp must match on the same history row
    visits = leads.filter(
        status_history__status=Lead.STATUS_VISITED,
        status_history__timestamp__gte=start,
        status_history__timestamp__lt=end,
    ).distinct().count()

    return {
        'contacts_added': contacts_added,
        'chats_updated': chats_updated,
        'visits': visits,
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_metrics(request):
    """Contacts added, chats updated and visits for a project over a date range"""
    project_id = request.query_params.get('project_id')

    if is_admin_user(request.user):
        if not project_id:
            return Response({'error': 'project_id is required for admin'}, status=status.HTTP_400_BAD_REQUEST)
        if not str(project_id).isdigit() or not Project.objects.filter(pk=project_id).exists():
            return Response({'error': 'Project not found'}, status=status.HTTP_400_BAD_REQUEST)
        target_project_id = int(project_id)
    else:
        project_ids = get_user_project_ids(request.user)
        if not project_ids:
            return Response(dict(EMPTY_METRICS))
        if project_id and str(project_id) in {str(pid) for pid in project_ids}:
            target_project_id = int(project_id)
        elif len(project_ids) == 1:
            target_project_id = project_ids[0]
        else:
            return Response(
                {'error': 'project_id is required when manager has multiple projects'},
                status=status.HTTP_400_BAD_REQUEST
            )

    range_name = request.query_params.get('range')
    if not range_name:
        return Response(
            {'error': 'range parameter is required (today, thisweek, thismonth, or custom)'},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        start, end = get_date_range(range_name, request.query_params.get('from'), request.query_params.get('to'))
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    cached_data, cache_key = get_cached_dashboard_metrics(target_project_id, range_name, start, end)
    if cached_data is not None:
        logger.debug(f"Cache hit for dashboard metrics (project {target_project_id}, {range_name})")
        return Response(cached_data)

    try:
        metrics = compute_metrics(target_project_id, start, end)
    except Exception as e:
        logger.error(f"Error computing dashboard metrics: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    cache_dashboard_metrics(cache_key, metrics)
    return Response(metrics)
