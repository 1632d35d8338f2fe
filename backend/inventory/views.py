import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from backend.core.utils import log_activity
from .filters import InventoryItemFilter
from .models import InventoryItem
from .serializers import InventoryItemSerializer

logger = logging.getLogger('backend.inventory')


def inventory_queryset():
    return InventoryItem.objects.prefetch_related('notes__added_by')


def _note_text(value):
    return str(value or '').strip()


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inventory_list_create(request):
    """List inventory items or create a new one"""
    if request.method == 'GET':
        filterset = InventoryItemFilter(request.query_params, queryset=inventory_queryset())
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        items = filterset.qs.order_by('-created_at', '-id')
        logger.debug(f"Retrieved {len(items)} inventory items")
        return Response(InventoryItemSerializer(items, many=True).data)

    serializer = InventoryItemSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Inventory creation validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    note = _note_text(request.data.get('notes'))
    with transaction.atomic():
        item = serializer.save()
        if note:
            item.notes.create(text=note, added_by=request.user)

    log_activity(request, 'create', 'InventoryItem', item.pk, object_name=str(item))
    logger.info(f"Inventory item {item.pk} created by {request.user.email}")
    return Response(InventoryItemSerializer(inventory_queryset().get(pk=item.pk)).data,
                    status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inventory_detail(request, pk):
    """Retrieve, update or delete an inventory item"""
    item = get_object_or_404(inventory_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(InventoryItemSerializer(item).data)

    if request.method == 'DELETE':
        name = str(item)
        item.delete()
        log_activity(request, 'delete', 'InventoryItem', pk, object_name=name)
        logger.info(f"Inventory item {pk} deleted by {request.user.email}")
        return Response({'message': 'Inventory item deleted successfully'})

    serializer = InventoryItemSerializer(item, data=request.data, partial=True)
    if not serializer.is_valid():
        logger.warning(f"Inventory {pk} update validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    note = _note_text(request.data.get('notes'))
    with transaction.atomic():
        item = serializer.save()
        # The form resubmits its initial note on every save
        if note and not item.notes.filter(text=note).exists():
            item.notes.create(text=note, added_by=request.user)

    log_activity(request, 'update', 'InventoryItem', item.pk, object_name=str(item),
                 changes={'fields': sorted(serializer.validated_data.keys())})
    logger.info(f"Inventory item {pk} updated by {request.user.email}")
    return Response(InventoryItemSerializer(inventory_queryset().get(pk=item.pk)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inventory_add_note(request, pk):
    """Append a note to an inventory item"""
    text = _note_text(request.data.get('text'))
    if not text:
        return Response({'error': 'Note text is required'}, status=status.HTTP_400_BAD_REQUEST)

    item = get_object_or_404(InventoryItem, pk=pk)
    note = item.notes.create(text=text, added_by=request.user)

    log_activity(request, 'note_add', 'InventoryItem', item.pk, object_name=str(item), changes={'note_id': note.pk})
    logger.info(f"Note added to inventory item {pk} by {request.user.email}")
    return Response(InventoryItemSerializer(inventory_queryset().get(pk=item.pk)).data)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def inventory_delete_note(request, pk, note_id):
    """Remove a note from an inventory item"""
    item = get_object_or_404(InventoryItem, pk=pk)
    note = item.notes.filter(pk=note_id).first()
    if note is None:
        return Response({'error': 'Note not found'}, status=status.HTTP_404_NOT_FOUND)

    note.delete()
    log_activity(request, 'note_delete', 'InventoryItem', item.pk, object_name=str(item), changes={'note_id': note_id})
    logger.info(f"Note {note_id} removed from inventory item {pk} by {request.user.email}")
    return Response(InventoryItemSerializer(inventory_queryset().get(pk=item.pk)).data)
