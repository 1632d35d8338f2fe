import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from backend.core.permissions import is_admin_user, get_user_project_ids
from backend.core.utils import log_activity
from backend.projects.models import Project
from .filters import LeadFilter
from .models import Lead
from .serializers import LeadSerializer

logger = logging.getLogger('backend.leads')

EDITABLE_FIELDS = ('name', 'contact_no', 'requirement', 'referred_by', 'lead_source')


def lead_queryset():
    return Lead.objects.select_related('project').prefetch_related(
        'remarks__added_by', 'status_history__changed_by'
    )


def resolve_lead_projects(user, requested_project_id):
    """
    Work out which project ids a lead listing covers.

    Returns (project_ids, error_message). Admins must name a project.
    Managers fall back to their own assignments.
    """
    if is_admin_user(user):
        if not requested_project_id:
            return None, 'project_id query parameter is required for admin'
        try:
            return [int(requested_project_id)], None
        except (TypeError, ValueError):
            return None, 'Invalid project_id'

    project_ids = get_user_project_ids(user)
    if not project_ids:
        return [], None
    if requested_project_id and str(requested_project_id) in {str(pid) for pid in project_ids}:
        return [int(requested_project_id)], None
    return project_ids, None


def can_access_project(user, project_id):
    return is_admin_user(user) or project_id in get_user_project_ids(user)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def lead_list_create(request):
    """List leads for a project or create a new lead"""
    try:
        if request.method == 'GET':
            project_ids, error = resolve_lead_projects(request.user, request.query_params.get('project_id'))
            if error:
                logger.warning(f"Lead list rejected for {request.user.email}: {error}")
                return Response({'error': error}, status=status.HTTP_400_BAD_REQUEST)
            if not project_ids:
                return Response([])

            queryset = lead_queryset().filter(project_id__in=project_ids)
            filterset = LeadFilter(request.query_params, queryset=queryset)
            if not filterset.is_valid():
                return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
            leads = filterset.qs.order_by('-created_at', '-id')
            return Response(LeadSerializer(leads, many=True).data)

        serializer = LeadSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Lead creation validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        project = Project.objects.filter(pk=data['project_id']).first()
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_400_BAD_REQUEST)

        if not can_access_project(request.user, project.pk):
            logger.warning(f"Manager {request.user.email} attempted to create lead for project {project.pk}")
            return Response(
                {'error': 'Manager can only create leads for their assigned project(s)'},
                status=status.HTTP_403_FORBIDDEN
            )

        remark = data.pop('remark', '').strip()
        data.pop('project_id')
        with transaction.atomic():
            lead = Lead.objects.create(project=project, **data)
            lead.record_status(lead.status, request.user)
            if remark:
                lead.add_remark(remark, request.user)

        log_activity(request, 'create', 'Lead', lead.pk, object_name=lead.name,
                     changes={'project_id': project.pk, 'status': lead.status})
        logger.info(f"Lead '{lead.name}' created in project {project.pk} by {request.user.email}")
        lead = lead_queryset().get(pk=lead.pk)
        return Response(LeadSerializer(lead).data, status=status.HTTP_201_CREATED)
    except Exception as e:
        logger.error(f"Unexpected error in lead_list_create: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def lead_detail(request, pk):
    """Retrieve, update or delete a lead (delete requires admin)"""
    lead = get_object_or_404(lead_queryset(), pk=pk)

    if not can_access_project(request.user, lead.project_id):
        logger.warning(f"User {request.user.email} denied access to lead {pk}")
        return Response(
            {'error': 'Manager can only access leads for their assigned project(s)'},
            status=status.HTTP_403_FORBIDDEN
        )

    if request.method == 'GET':
        return Response(LeadSerializer(lead).data)

    if request.method == 'DELETE':
        if not is_admin_user(request.user):
            logger.warning(f"User {request.user.email} attempted to delete lead {pk} without admin privileges")
            return Response({'error': 'Only admin can delete leads'}, status=status.HTTP_403_FORBIDDEN)
        name = lead.name
        lead.delete()
        log_activity(request, 'delete', 'Lead', pk, object_name=name)
        logger.info(f"Lead {pk} deleted by {request.user.email}")
        return Response({'message': 'Lead deleted successfully'})

    serializer = LeadSerializer(lead, data=request.data, partial=True)
    if not serializer.is_valid():
        logger.warning(f"Lead {pk} update validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    changes = {}
    with transaction.atomic():
        for field in EDITABLE_FIELDS:
            if field in data and data[field] != getattr(lead, field):
                changes[field] = data[field]
                setattr(lead, field, data[field])

        new_status = data.get('status')
        if new_status is not None and new_status != lead.status:
            changes['status'] = {'from': lead.status, 'to': new_status}
            lead.status = new_status
            lead.record_status(new_status, request.user)

        remark = data.get('remark', '').strip()
        if remark:
            lead.add_remark(remark, request.user)
            changes['remark'] = remark

        if changes:
            lead.touch()
            lead.save()

    if 'status' in changes:
        log_activity(request, 'status_change', 'Lead', lead.pk, object_name=lead.name, changes=changes['status'])
    if changes:
        log_activity(request, 'update', 'Lead', lead.pk, object_name=lead.name, changes={'fields': sorted(changes)})
        logger.info(f"Lead {pk} updated by {request.user.email}: {sorted(changes)}")

    lead = lead_queryset().get(pk=lead.pk)
    return Response(LeadSerializer(lead).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def lead_add_remark(request, pk):
    """Append a remark to a lead"""
    text = str(request.data.get('text') or '').strip()
    if not text:
        return Response({'error': 'Remark text is required'}, status=status.HTTP_400_BAD_REQUEST)

    lead = get_object_or_404(Lead, pk=pk)
    if not can_access_project(request.user, lead.project_id):
        logger.warning(f"User {request.user.email} denied adding remark to lead {pk}")
        return Response(
            {'error': 'Manager can only add remarks to leads for their assigned project(s)'},
            status=status.HTTP_403_FORBIDDEN
        )

    with transaction.atomic():
        lead.add_remark(text, request.user)
        lead.touch()
        lead.save(update_fields=['last_updated_at', 'updated_at'])

    log_activity(request, 'remark_add', 'Lead', lead.pk, object_name=lead.name, changes={'text': text})
    logger.info(f"Remark added to lead {pk} by {request.user.email}")
    lead = lead_queryset().get(pk=lead.pk)
    return Response(LeadSerializer(lead).data)
