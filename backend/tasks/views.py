import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F, Max, Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from backend.core.permissions import is_admin_user, get_user_project_ids, IsAdminRole
from backend.core.utils import log_activity
from backend.leads.models import Lead
from backend.notifications.models import Notification
from backend.notifications.utils import create_notification
from backend.projects.models import Project
from .models import Task
from .serializers import TaskSerializer, TaskDetailSerializer, TaskWriteSerializer

logger = logging.getLogger('backend.tasks')

User = get_user_model()

VALID_STATUSES = [choice[0] for choice in Task.STATUS_CHOICES]


def task_queryset():
    return Task.objects.select_related(
        'assigned_to', 'project', 'lead', 'created_by'
    ).prefetch_related('comments__added_by')


def task_response(task, status_code=status.HTTP_200_OK):
    return Response(TaskDetailSerializer(task_queryset().get(pk=task.pk)).data, status=status_code)


def is_assignee(user, task):
    return task.assigned_to_id is not None and task.assigned_to_id == user.pk


def resolve_assignee(user_id):
    """Returns (manager, error_message)"""
    user = User.objects.filter(pk=user_id).first()
    if user is None:
        return None, 'Assigned user not found'
    if user.role != User.ROLE_MANAGER:
        return None, 'Tasks can only be assigned to managers'
    return user, None


def resolve_task_project(manager, project_id, auto_assign_only=False):
    """
    Pick the project a task for `manager` belongs to.

    With no project given, a manager with exactly one project gets it.
    Returns (project, error_message); project may be None.
    """
    manager_project_ids = get_user_project_ids(manager)

    if project_id in (None, ''):
        if len(manager_project_ids) == 1:
            return Project.objects.get(pk=manager_project_ids[0]), None
        if len(manager_project_ids) > 1 and not auto_assign_only:
            return None, 'project_id is required when manager has multiple projects'
        return None, None

    project = Project.objects.filter(pk=project_id).first()
    if project is None:
        return None, 'Project not found'
    if project.pk not in manager_project_ids:
        return None, 'Manager does not have access to this project'
    return project, None


def notify_task_participants(notification_type, task, actor, message, metadata=None):
    """Notify the task's creator and assignee, never the actor"""
    return create_notification(
        notification_type,
        task,
        actor,
        [task.created_by, task.assigned_to],
        message,
        metadata,
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def task_list_create(request):
    """List tasks (managers see their own) or create a task (admin only)"""
    try:
        if request.method == 'GET':
            tasks = task_queryset()
            if not is_admin_user(request.user):
                tasks = tasks.filter(assigned_to=request.user)
            tasks = tasks.order_by('-created_at', '-id')
            return Response(TaskSerializer(tasks, many=True).data)

        if not is_admin_user(request.user):
            logger.warning(f"User {request.user.email} attempted to create task without admin privileges")
            return Response({'error': 'Only admin can create tasks'}, status=status.HTTP_403_FORBIDDEN)

        serializer = TaskWriteSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Task creation validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        assignee, error = resolve_assignee(data['assigned_to'])
        if error:
            return Response({'error': error}, status=status.HTTP_400_BAD_REQUEST)

        project, error = resolve_task_project(assignee, data.get('project_id'))
        if error:
            return Response({'error': error}, status=status.HTTP_400_BAD_REQUEST)

        lead = None
        if data.get('lead_id'):
            lead = Lead.objects.filter(pk=data['lead_id']).first()
            if lead is None:
                return Response({'error': 'Lead not found'}, status=status.HTTP_400_BAD_REQUEST)

        number = data['number'].strip()
        if Task.number_in_use(number):
            return Response({'error': f'A task with number "{number}" already exists'},
                            status=status.HTTP_400_BAD_REQUEST)

        task = Task.objects.create(
            number=number,
            description=data.get('description', '').strip(),
            assigned_to=assignee,
            project=project,
            lead=lead,
            created_by=request.user,
            status=Task.STATUS_OPEN,
        )

        create_notification(
            Notification.TYPE_ASSIGNMENT, task, request.user, assignee,
            f"{request.user.name or 'Admin'} assigned task {task.number} to you",
        )
        log_activity(request, 'create', 'Task', task.pk, object_name=task.number,
                     changes={'assigned_to': assignee.pk, 'project_id': project.pk if project else None})
        logger.info(f"Task {task.number} created and assigned to {assignee.email} by {request.user.email}")
        return task_response(task, status.HTTP_201_CREATED)
    except Exception as e:
        logger.error(f"Unexpected error in task_list_create: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def task_detail(request, pk):
    """Retrieve a task, or update/delete it (admin only)"""
    task = get_object_or_404(task_queryset(), pk=pk)

    if request.method == 'GET':
        if not is_admin_user(request.user) and not is_assignee(request.user, task):
            return Response({'error': 'Access denied'}, status=status.HTTP_403_FORBIDDEN)
        return Response(TaskDetailSerializer(task).data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user.email} attempted to modify task {pk} without admin privileges")
        return Response({'error': 'Only admin can modify tasks'}, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'DELETE':
        number = task.number
        task.delete()
        log_activity(request, 'delete', 'Task', pk, object_name=number)
        logger.info(f"Task {number} deleted by {request.user.email}")
        return Response({'message': 'Task deleted successfully'})

    serializer = TaskWriteSerializer(data=request.data, partial=True)
    if not serializer.is_valid():
        logger.warning(f"Task {pk} update validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    if 'number' in data:
        number = data['number'].strip()
        if number != task.number and Task.number_in_use(number, exclude_pk=task.pk):
            return Response({'error': f'A task with number "{number}" already exists'},
                            status=status.HTTP_400_BAD_REQUEST)
        task.number = number

    if 'description' in data:
        task.description = data['description'].strip()

    old_assignee_id = task.assigned_to_id
    if 'assigned_to' in data:
        assignee, error = resolve_assignee(data['assigned_to'])
        if error:
            return Response({'error': error}, status=status.HTTP_400_BAD_REQUEST)
        task.assigned_to = assignee

        if 'project_id' in data:
            if data['project_id']:
                project, error = resolve_task_project(assignee, data['project_id'])
                if error:
                    return Response({'error': error}, status=status.HTTP_400_BAD_REQUEST)
                task.project = project
            else:
                task.project = None
        else:
            project, _ = resolve_task_project(assignee, None, auto_assign_only=True)
            if project is not None:
                task.project = project
    elif 'project_id' in data:
        if data['project_id']:
            project = Project.objects.filter(pk=data['project_id']).first()
            if project is None:
                return Response({'error': 'Project not found'}, status=status.HTTP_400_BAD_REQUEST)
            task.project = project
        else:
            task.project = None

    task.save()

    if task.assigned_to_id != old_assignee_id and task.assigned_to is not None:
        create_notification(
            Notification.TYPE_REASSIGNMENT, task, request.user, task.assigned_to,
            f"{request.user.name or 'Admin'} reassigned task {task.number} to you",
        )

    log_activity(request, 'update', 'Task', task.pk, object_name=task.number,
                 changes={'fields': sorted(data.keys())})
    logger.info(f"Task {pk} updated by {request.user.email}")
    return task_response(task)


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def task_update_status(request, pk):
    """Move a task to a new status under the role rules"""
    new_status = request.data.get('status')
    if new_status not in VALID_STATUSES:
        return Response({'error': 'Invalid status'}, status=status.HTTP_400_BAD_REQUEST)

    task = get_object_or_404(Task.objects.select_related('assigned_to', 'created_by'), pk=pk)
    is_admin = is_admin_user(request.user)

    if not is_admin:
        if not is_assignee(request.user, task):
            return Response({'error': 'Access denied'}, status=status.HTTP_403_FORBIDDEN)
        if new_status != Task.STATUS_COMPLETED:
            return Response({'error': 'Managers can only set status to COMPLETED'}, status=status.HTTP_403_FORBIDDEN)

    if new_status in Task.INACTIVE_STATUSES and not is_admin:
        return Response({'error': 'Only admin can close or cancel tasks'}, status=status.HTTP_403_FORBIDDEN)

    if new_status == Task.STATUS_CLOSED and task.status != Task.STATUS_COMPLETED:
        return Response({'error': 'Can only close tasks with COMPLETED status'}, status=status.HTTP_400_BAD_REQUEST)

    old_status = task.status
    task.status = new_status
    task.save()

    if old_status != new_status:
        notify_task_participants(
            Notification.TYPE_STATUS_CHANGE, task, request.user,
            f"{request.user.name or 'Someone'} changed status of task {task.number} from {old_status} to {new_status}",
            {'old_status': old_status, 'new_status': new_status},
        )
        log_activity(request, 'status_change', 'Task', task.pk, object_name=task.number,
                     changes={'from': old_status, 'to': new_status})
        logger.info(f"Task {pk} status changed {old_status} -> {new_status} by {request.user.email}")

    return task_response(task)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def task_add_comment(request, pk):
    """Add a comment or a reply to a task"""
    text = str(request.data.get('text') or '').strip()
    if not text:
        return Response({'error': 'Comment text is required'}, status=status.HTTP_400_BAD_REQUEST)

    task = get_object_or_404(Task.objects.select_related('assigned_to', 'created_by'), pk=pk)
    is_admin = is_admin_user(request.user)
    if not is_admin and not is_assignee(request.user, task):
        logger.warning(f"User {request.user.email} denied commenting on task {pk}")
        return Response({'error': 'Access denied'}, status=status.HTTP_403_FORBIDDEN)

    parent = None
    parent_id = request.data.get('parent_comment_id')
    if parent_id:
        parent = task.comments.filter(pk=parent_id).first() if str(parent_id).isdigit() else None
        if parent is None:
            return Response({'error': 'Parent comment not found'}, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        comment = task.comments.create(text=text, added_by=request.user, parent=parent)
        # The other side now has an unread comment
        if is_admin:
            task.last_comments_viewed_by_manager = None
        else:
            task.last_comments_viewed_by_admin = None
        task.save()

    notify_task_participants(
        Notification.TYPE_COMMENT, task, request.user,
        f"{request.user.name or 'Someone'} commented on task {task.number}",
    )
    log_activity(request, 'comment_add', 'Task', task.pk, object_name=task.number,
                 changes={'comment_id': comment.pk, 'parent_comment_id': parent.pk if parent else None})
    logger.info(f"Comment added to task {pk} by {request.user.email}")
    return task_response(task)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def task_reassign(request, pk):
    """Send a task back to its manager as REASSIGNED, optionally with a comment"""
    task = get_object_or_404(Task.objects.select_related('assigned_to'), pk=pk)
    comment = str(request.data.get('comment') or '').strip()

    with transaction.atomic():
        task.status = Task.STATUS_REASSIGNED
        task.last_viewed_by_manager = None
        task.last_comments_viewed_by_manager = None
        if comment:
            task.comments.create(text=comment, added_by=request.user)
            task.last_comments_viewed_by_admin = None
        task.save()

    if task.assigned_to is not None:
        create_notification(
            Notification.TYPE_REASSIGNMENT, task, request.user, task.assigned_to,
            f"{request.user.name or 'Admin'} reassigned task {task.number} to you",
        )
    log_activity(request, 'reassign', 'Task', task.pk, object_name=task.number,
                 changes={'comment': comment or None})
    logger.info(f"Task {pk} reassigned by {request.user.email}")
    return task_response(task)


def _new_comment_filter(view_mark_field):
    """Tasks whose latest comment is newer than the given view mark"""
    return Q(latest_comment__isnull=False) & (
        Q(**{f'{view_mark_field}__isnull': True}) | Q(latest_comment__gt=F(view_mark_field))
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def task_pending_count(request):
    """Badge count of tasks needing the caller's attention"""
    open_tasks = Task.objects.exclude(status=Task.STATUS_CLOSED).annotate(latest_comment=Max('comments__timestamp'))

    if is_admin_user(request.user):
        completed_not_viewed = Task.objects.filter(
            status=Task.STATUS_COMPLETED, last_viewed_by_admin__isnull=True
        ).count()
        new_comments = open_tasks.filter(_new_comment_filter('last_comments_viewed_by_admin')).count()
        return Response({'count': completed_not_viewed + new_comments})

    own_tasks = open_tasks.filter(assigned_to=request.user)
    not_viewed = own_tasks.filter(
        Q(last_viewed_by_manager__isnull=True) |
        Q(created_at__gt=F('last_viewed_by_manager')) |
        Q(updated_at__gt=F('last_viewed_by_manager'))
    ).count()
    new_comments = own_tasks.filter(_new_comment_filter('last_comments_viewed_by_manager')).count()
    return Response({'count': not_viewed + new_comments})


def _stamp_view_mark(request, pk, admin_field, manager_field):
    task = get_object_or_404(Task, pk=pk)
    if is_admin_user(request.user):
        field = admin_field
    elif is_assignee(request.user, task):
        field = manager_field
    else:
        return Response({'error': 'Access denied'}, status=status.HTTP_403_FORBIDDEN)

    # Queryset update leaves updated_at alone so the view itself is not a change
    Task.objects.filter(pk=task.pk).update(**{field: timezone.now()})
    return Response({'success': True, 'task': TaskSerializer(task_queryset().get(pk=task.pk)).data})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def task_mark_viewed(request, pk):
    """Stamp the caller's task-view mark"""
    return _stamp_view_mark(request, pk, 'last_viewed_by_admin', 'last_viewed_by_manager')


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def task_mark_comments_viewed(request, pk):
    """Stamp the caller's comment-view mark"""
    return _stamp_view_mark(request, pk, 'last_comments_viewed_by_admin', 'last_comments_viewed_by_manager')
