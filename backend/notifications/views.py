import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.utils import timezone
from .models import Notification
from .serializers import NotificationSerializer

logger = logging.getLogger('backend.notifications')

RECENT_LIMIT = 50


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def notification_list(request):
    """The caller's most recent notifications, or clear them all"""
    notifications = Notification.objects.filter(target_user=request.user)

    if request.method == 'DELETE':
        deleted, _ = notifications.delete()
        logger.info(f"User {request.user.email} cleared {deleted} notification(s)")
        return Response({'message': 'All notifications cleared', 'deleted': deleted})

    notifications = notifications.select_related('task', 'triggered_by').order_by('-created_at', '-id')[:RECENT_LIMIT]
    return Response(NotificationSerializer(notifications, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_unread_count(request):
    """Number of unread notifications for the caller"""
    count = Notification.objects.filter(target_user=request.user, is_read=False).count()
    return Response({'count': count})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def notification_mark_all_read(request):
    """Mark every unread notification of the caller as read"""
    updated = Notification.objects.filter(target_user=request.user, is_read=False).update(
        is_read=True, read_at=timezone.now(), updated_at=timezone.now()
    )
    logger.info(f"User {request.user.email} marked {updated} notification(s) as read")
    return Response({'message': 'All notifications marked as read', 'updated': updated})


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def notification_mark_read(request, pk):
    """Mark one of the caller's notifications as read"""
    notification = Notification.objects.filter(pk=pk, target_user=request.user).first()
    if notification is None:
        return Response({'error': 'Notification not found'}, status=status.HTTP_404_NOT_FOUND)

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=['is_read', 'read_at', 'updated_at'])
    return Response(NotificationSerializer(notification).data)
