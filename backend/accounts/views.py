import logging
from decimal import Decimal
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Sum, Q, DecimalField
from django.shortcuts import get_object_or_404
from backend.core.permissions import IsAdminRole
from backend.core.utils import log_activity
from backend.projects.models import Project
from .filters import AccountEntryFilter
from .models import AccountEntry
from .serializers import AccountEntrySerializer

logger = logging.getLogger('backend.accounts')


def account_queryset():
    return AccountEntry.objects.select_related('project', 'added_by')


def _filtered_entries(request, fields):
    """Apply the subset of AccountEntryFilter named in `fields`; returns (queryset, errors)"""
    params = {key: value for key, value in request.query_params.items() if key in fields}
    filterset = AccountEntryFilter(params, queryset=account_queryset())
    if not filterset.is_valid():
        return None, filterset.errors
    return filterset.qs, None


def _sum(field_filter):
    return Sum('amount', filter=field_filter, output_field=DecimalField())


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def account_list_create(request):
    """List account entries or book a new one"""
    if request.method == 'GET':
        entries, errors = _filtered_entries(request, ('project_id', 'type', 'start_date', 'end_date'))
        if errors:
            return Response(errors, status=status.HTTP_400_BAD_REQUEST)
        entries = entries.order_by('-date', '-created_at', '-id')
        return Response(AccountEntrySerializer(entries, many=True).data)

    try:
        serializer = AccountEntrySerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Account entry validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        project = Project.objects.filter(pk=serializer.validated_data['project_id']).first()
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)

        entry = serializer.save(project=project, added_by=request.user)
        log_activity(request, 'create', 'AccountEntry', entry.pk, object_name=str(entry),
                     changes={'project_id': project.pk, 'type': entry.entry_type, 'amount': str(entry.amount)})
        logger.info(f"Account entry {entry.pk} ({entry.entry_type} {entry.amount}) created by {request.user.email}")
        return Response(AccountEntrySerializer(entry).data, status=status.HTTP_201_CREATED)
    except Exception as e:
        logger.error(f"Unexpected error in account_list_create: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def account_detail(request, pk):
    """Retrieve, update or delete an account entry"""
    entry = get_object_or_404(account_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(AccountEntrySerializer(entry).data)

    if request.method == 'DELETE':
        name = str(entry)
        entry.delete()
        log_activity(request, 'delete', 'AccountEntry', pk, object_name=name)
        logger.info(f"Account entry {pk} deleted by {request.user.email}")
        return Response({'message': 'Account entry deleted successfully'})

    serializer = AccountEntrySerializer(entry, data=request.data, partial=True)
    if not serializer.is_valid():
        logger.warning(f"Account entry {pk} update validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    save_kwargs = {}
    if 'project_id' in serializer.validated_data:
        project = Project.objects.filter(pk=serializer.validated_data['project_id']).first()
        if project is None:
            return Response({'error': 'Project not found'}, status=status.HTTP_404_NOT_FOUND)
        save_kwargs['project'] = project

    entry = serializer.save(**save_kwargs)
    log_activity(request, 'update', 'AccountEntry', entry.pk, object_name=str(entry),
                 changes={'fields': sorted(serializer.validated_data.keys())})
    logger.info(f"Account entry {pk} updated by {request.user.email}")
    return Response(AccountEntrySerializer(entry).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def account_summary(request):
    """Totals per entry type for a project and optional date window"""
    entries, errors = _filtered_entries(request, ('project_id', 'start_date', 'end_date'))
    if errors:
        return Response(errors, status=status.HTTP_400_BAD_REQUEST)

    totals = entries.aggregate(
        income=_sum(Q(entry_type=AccountEntry.TYPE_INCOME)),
        expenses=_sum(Q(entry_type=AccountEntry.TYPE_EXPENSE)),
        payouts=_sum(Q(entry_type=AccountEntry.TYPE_PAYOUT)),
        incoming_loans=_sum(Q(entry_type=AccountEntry.TYPE_INCOMING_LOAN)),
        outgoing_loans=_sum(Q(entry_type=AccountEntry.TYPE_OUTGOING_LOAN)),
    )
    totals = {key: value or Decimal('0.00') for key, value in totals.items()}

    return Response({
        'total_income': float(totals['income']),
        'total_expenses': float(totals['expenses']),
        'total_payouts': float(totals['payouts']),
        'total_incoming_loans': float(totals['incoming_loans']),
        'total_outgoing_loans': float(totals['outgoing_loans']),
        # Positive: the project is owed money; negative: the project owes
        'total_loans': float(totals['outgoing_loans'] - totals['incoming_loans']),
        'total_profit': float(totals['income'] - totals['expenses']),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def account_categories(request):
    """Distinct categories, optionally for one project"""
    entries, errors = _filtered_entries(request, ('project_id',))
    if errors:
        return Response(errors, status=status.HTTP_400_BAD_REQUEST)
    categories = entries.order_by('category').values_list('category', flat=True).distinct()
    return Response(list(categories))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def account_modes(request):
    """Distinct payment modes across all projects"""
    modes = AccountEntry.objects.order_by('mode').values_list('mode', flat=True).distinct()
    return Response(list(modes))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def account_balance(request):
    """All-time balance per payment mode"""
    rows = AccountEntry.objects.values('mode').annotate(
        credits=_sum(Q(entry_type__in=AccountEntry.CREDIT_TYPES)),
        debits=_sum(Q(entry_type__in=AccountEntry.DEBIT_TYPES)),
    ).order_by('mode')

    balances = [
        {
            'mode': row['mode'],
            'balance': float((row['credits'] or Decimal('0.00')) - (row['debits'] or Decimal('0.00'))),
        }
        for row in rows
    ]
    return Response(balances)
