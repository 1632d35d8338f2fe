import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from backend.core.permissions import is_admin_user
from backend.core.utils import log_activity
from .models import Campaign, CampaignLead
from .serializers import CampaignSerializer, CampaignLeadSerializer, CampaignCreateSerializer

logger = logging.getLogger('backend.campaigns')

User = get_user_model()

VALID_LEAD_STATUSES = [choice[0] for choice in CampaignLead.STATUS_CHOICES]


def resolve_campaign_manager(user_id):
    """Returns (manager, error_message)"""
    if user_id in (None, ''):
        return None, 'assigned_to is required'
    manager = User.objects.filter(pk=user_id).first() if str(user_id).isdigit() else None
    if manager is None:
        return None, 'Assigned user not found'
    if manager.role != User.ROLE_MANAGER:
        return None, 'Campaign can only be assigned to a manager'
    return manager, None


def campaign_lead_queryset():
    return CampaignLead.objects.select_related('campaign__assigned_to').prefetch_related('remarks__added_by')


def can_access_campaign(user, campaign):
    return is_admin_user(user) or campaign.assigned_to_id == user.pk


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def campaign_list_create(request):
    """List campaigns with lead counts, or create a campaign with its leads (admin only)"""
    if request.method == 'GET':
        campaigns = Campaign.objects.select_related('assigned_to').annotate(
            lead_count=Count('leads'),
            pending_count=Count('leads', filter=Q(leads__status=CampaignLead.STATUS_PENDING)),
        )
        if not is_admin_user(request.user):
            campaigns = campaigns.filter(assigned_to=request.user)
        campaigns = list(campaigns.order_by('-created_at', '-id'))

        for campaign in campaigns:
            campaign.sync_status(campaign.lead_count, campaign.pending_count)
        return Response(CampaignSerializer(campaigns, many=True).data)

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user.email} attempted to create campaign without admin privileges")
        return Response({'error': 'Only admins can create campaigns'}, status=status.HTTP_403_FORBIDDEN)

    try:
        serializer = CampaignCreateSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Campaign creation validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        manager, error = resolve_campaign_manager(data['assigned_to'])
        if error:
            return Response({'error': error}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            campaign = Campaign.objects.create(name=data['name'], assigned_to=manager)
            CampaignLead.objects.bulk_create([
                CampaignLead(campaign=campaign, **lead) for lead in data['leads']
            ])

        leads_count = len(data['leads'])
        log_activity(request, 'create', 'Campaign', campaign.pk, object_name=campaign.name,
                     changes={'assigned_to': manager.pk, 'leads_count': leads_count})
        logger.info(f"Campaign {campaign.name} created with {leads_count} leads by {request.user.email}")
        return Response({
            'message': 'Campaign created successfully',
            'campaign': CampaignSerializer(campaign).data,
            'leads_count': leads_count,
        }, status=status.HTTP_201_CREATED)
    except Exception as e:
        logger.error(f"Unexpected error in campaign_list_create: {str(e)}", exc_info=True)
        return Response({'error': 'An unexpected error occurred'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def campaign_detail(request, pk):
    """Campaign with its leads; reassignment and deletion are admin only"""
    campaign = get_object_or_404(Campaign.objects.select_related('assigned_to'), pk=pk)

    if request.method == 'GET':
        if not can_access_campaign(request.user, campaign):
            return Response({'error': 'Access denied'}, status=status.HTTP_403_FORBIDDEN)
        leads = campaign_lead_queryset().filter(campaign=campaign).order_by('-created_at', '-id')
        return Response({
            'campaign': CampaignSerializer(campaign).data,
            'leads': CampaignLeadSerializer(leads, many=True).data,
        })

    if not is_admin_user(request.user):
        logger.warning(f"User {request.user.email} attempted to modify campaign {pk} without admin privileges")
        return Response({'error': 'Only admins can modify campaigns'}, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'DELETE':
        name = campaign.name
        campaign.delete()
        log_activity(request, 'delete', 'Campaign', pk, object_name=name)
        logger.info(f"Campaign {name} deleted by {request.user.email}")
        return Response({'message': 'Campaign deleted successfully'})

    manager, error = resolve_campaign_manager(request.data.get('assigned_to'))
    if error:
        return Response({'error': error}, status=status.HTTP_400_BAD_REQUEST)

    previous = campaign.assigned_to_id
    campaign.assigned_to = manager
    campaign.save(update_fields=['assigned_to', 'updated_at'])

    log_activity(request, 'reassign', 'Campaign', campaign.pk, object_name=campaign.name,
                 changes={'from': previous, 'to': manager.pk})
    logger.info(f"Campaign {campaign.name} reassigned to {manager.email} by {request.user.email}")
    return Response(CampaignSerializer(campaign).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def campaign_leads_all(request):
    """Campaign leads across campaigns, filtered by campaign, status and manager"""
    campaign_id = request.query_params.get('campaign_id')
    lead_status = request.query_params.get('status')

    if is_admin_user(request.user):
        manager_id = request.query_params.get('manager_id')
        campaign_ids = None
        if manager_id:
            campaign_ids = []
            if str(manager_id).isdigit():
                campaign_ids = list(Campaign.objects.filter(assigned_to_id=manager_id).values_list('id', flat=True))
    else:
        campaign_ids = list(Campaign.objects.filter(assigned_to=request.user).values_list('id', flat=True))

    leads = campaign_lead_queryset()
    if campaign_ids is not None:
        if not campaign_ids:
            return Response([])
        if campaign_id:
            # A campaign outside the allowed set yields nothing
            if campaign_id not in {str(cid) for cid in campaign_ids}:
                return Response([])
            leads = leads.filter(campaign_id=campaign_id)
        else:
            leads = leads.filter(campaign_id__in=campaign_ids)
    elif campaign_id:
        if not str(campaign_id).isdigit():
            return Response([])
        leads = leads.filter(campaign_id=campaign_id)

    if lead_status in VALID_LEAD_STATUSES:
        leads = leads.filter(status=lead_status)

    leads = leads.order_by('-created_at', '-id')
    return Response(CampaignLeadSerializer(leads, many=True).data)


def _get_accessible_lead(request, pk):
    """Returns (lead, error_response)"""
    lead = campaign_lead_queryset().filter(pk=pk).first()
    if lead is None:
        return None, Response({'error': 'Lead not found'}, status=status.HTTP_404_NOT_FOUND)
    if not can_access_campaign(request.user, lead.campaign):
        logger.warning(f"User {request.user.email} denied access to campaign lead {pk}")
        return None, Response({'error': 'Access denied'}, status=status.HTTP_403_FORBIDDEN)
    return lead, None


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def campaign_lead_update_status(request, pk):
    """Set a campaign lead's outreach status"""
    new_status = request.data.get('status')
    if new_status not in VALID_LEAD_STATUSES:
        return Response({'error': 'Valid status is required (pending, contacted, NA, hot)'},
                        status=status.HTTP_400_BAD_REQUEST)

    lead, error_response = _get_accessible_lead(request, pk)
    if error_response:
        return error_response

    old_status = lead.status
    lead.status = new_status
    lead.save(update_fields=['status', 'updated_at'])
    lead.campaign.sync_status()

    if old_status != new_status:
        log_activity(request, 'status_change', 'CampaignLead', lead.pk, object_name=lead.name,
                     changes={'from': old_status, 'to': new_status})
        logger.info(f"Campaign lead {pk} status {old_status} -> {new_status} by {request.user.email}")
    return Response(CampaignLeadSerializer(lead).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def campaign_lead_add_remark(request, pk):
    """Append a remark to a campaign lead"""
    text = str(request.data.get('text') or '').strip()
    if not text:
        return Response({'error': 'Remark text is required'}, status=status.HTTP_400_BAD_REQUEST)

    lead, error_response = _get_accessible_lead(request, pk)
    if error_response:
        return error_response

    remark = lead.remarks.create(text=text, added_by=request.user)
    log_activity(request, 'remark_add', 'CampaignLead', lead.pk, object_name=lead.name,
                 changes={'remark_id': remark.pk})
    logger.info(f"Remark added to campaign lead {pk} by {request.user.email}")
    return Response(CampaignLeadSerializer(campaign_lead_queryset().get(pk=lead.pk)).data)
