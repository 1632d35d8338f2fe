import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.contrib.auth import get_user_model
from django.db import transaction
from django.shortcuts import get_object_or_404
from backend.core.cache_signals import suspend_cache_signals
from backend.core.cache_utils import invalidate_dashboard_cache
from backend.core.permissions import is_admin_user, IsAdminRole
from backend.core.utils import log_activity
from .models import Project
from .serializers import ProjectSerializer

logger = logging.getLogger('backend.projects')

User = get_user_model()

SAMPLE_PROJECTS = [
    {
        'name': 'Downtown Office Complex',
        'location': 'New York, NY',
        'description': 'A modern 20-story office building in the heart of Manhattan with state-of-the-art facilities and prime location.',
    },
    {
        'name': 'Riverside Residential Tower',
        'location': 'Los Angeles, CA',
        'description': 'Luxury residential development with stunning river views, featuring 150 units with premium amenities.',
    },
    {
        'name': 'Tech Park Innovation Hub',
        'location': 'Austin, TX',
        'description': 'Mixed-use development combining office spaces, retail, and green areas designed for tech companies.',
    },
    {
        'name': 'Coastal Marina Resort',
        'location': 'Miami, FL',
        'description': 'Exclusive waterfront property featuring a marina, hotel, and residential condominiums with private beach access.',
    },
    {
        'name': 'Historic Warehouse Conversion',
        'location': 'Portland, OR',
        'description': 'Renovation of a 1920s warehouse into modern lofts and commercial spaces, preserving historic character.',
    },
]


def resolve_manager(manager_id):
    """
    Look up a user that may be assigned to a project.
    Returns (manager, error_message).
    """
    manager = User.objects.filter(pk=manager_id).first() if str(manager_id).isdigit() else None
    if manager is None:
        return None, 'Manager not found'
    if manager.role != User.ROLE_MANAGER:
        return None, 'User is not a manager'
    return manager, None


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def project_list_create(request):
    """List projects visible to the user or create a new project (create requires admin)"""
    try:
        if request.method == 'GET':
            if is_admin_user(request.user):
                projects = Project.objects.select_related('created_by').prefetch_related('managers')
            else:
                projects = request.user.projects.select_related('created_by').prefetch_related('managers')
            projects = projects.order_by('-created_at', '-id')
            return Response(ProjectSerializer(projects, many=True).data)

        if not is_admin_user(request.user):
            logger.warning(f"User {request.user.email} attempted to create project without admin privileges")
            return Response({'error': 'Only admin can create projects'}, status=status.HTTP_403_FORBIDDEN)

        serializer = ProjectSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Project creation validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        manager = None
        manager_id = request.data.get('manager_id')
        if manager_id:
            manager, error = resolve_manager(manager_id)
            if error:
                return Response({'error': error}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            project = serializer.save(created_by=request.user)
            if manager is not None:
                project.managers.add(manager)
                logger.info(f"Assigned project '{project.name}' to manager {manager.email}")

        log_activity(request, 'create', 'Project', project.pk, object_name=project.name,
                     changes={'manager_id': manager.pk if manager else None})
        logger.info(f"Project '{project.name}' created by {request.user.email}")
        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)
    except Exception as e:
        logger.error(f"Unexpected error in project_list_create: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def project_detail(request, pk):
    """Retrieve, update or delete a project (update/delete require admin)"""
    project = get_object_or_404(Project, pk=pk)

    if request.method == 'GET':
        return Response(ProjectSerializer(project).data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user.email} attempted to modify project {pk} without admin privileges")
        return Response({'error': 'Only admin can modify projects'}, status=status.HTTP_403_FORBIDDEN)

    if request.method in ('PUT', 'PATCH'):
        serializer = ProjectSerializer(project, data=request.data, partial=True)
        if not serializer.is_valid():
            logger.warning(f"Project {pk} update validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        new_manager = None
        reassign = 'manager_id' in request.data
        manager_id = request.data.get('manager_id')
        if reassign and manager_id:
            new_manager, error = resolve_manager(manager_id)
            if error:
                return Response({'error': error}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            project = serializer.save()
            if reassign:
                project.managers.clear()
                if new_manager is not None:
                    project.managers.add(new_manager)

        log_activity(request, 'update', 'Project', project.pk, object_name=project.name,
                     changes={'fields': sorted(request.data.keys())})
        logger.info(f"Project {pk} updated by {request.user.email}")
        return Response(ProjectSerializer(project).data)

    # DELETE
    name = project.name
    project.delete()
    log_activity(request, 'delete', 'Project', pk, object_name=name)
    logger.info(f"Project '{name}' deleted by {request.user.email}")
    return Response({'message': 'Project deleted successfully'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def project_seed(request):
    """Insert the sample projects; ?clear=true replaces existing ones"""
    clear_existing = request.query_params.get('clear') == 'true'

    with transaction.atomic():
        if clear_existing:
            # Cascades into leads; invalidate the dashboard once afterwards
            with suspend_cache_signals():
                Project.objects.all().delete()
            transaction.on_commit(invalidate_dashboard_cache)
            logger.info("Cleared existing projects before seeding")

        existing_count = Project.objects.count()
        if existing_count > 0:
            return Response({
                'error': 'Projects already exist. Use ?clear=true to replace them.',
                'existing_count': existing_count,
            }, status=status.HTTP_400_BAD_REQUEST)

        projects = [Project.objects.create(created_by=request.user, **data) for data in SAMPLE_PROJECTS]

    log_activity(request, 'seed', 'Project', 'sample', object_name=f'{len(projects)} sample projects',
                 changes={'cleared': clear_existing})
    logger.info(f"Seeded {len(projects)} sample projects")
    return Response({
        'message': f'Successfully seeded {len(projects)} projects',
        'projects': ProjectSerializer(projects, many=True).data,
    }, status=status.HTTP_201_CREATED)
