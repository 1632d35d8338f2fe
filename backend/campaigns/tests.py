"""
Test suite for outreach campaigns and their leads
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Campaign, CampaignLead


class CampaignStatusTests(TestCase):

    def test_status_for(self):
        self.assertEqual(Campaign.status_for(0, 0), Campaign.STATUS_PENDING)
        self.assertEqual(Campaign.status_for(3, 1), Campaign.STATUS_PENDING)
        self.assertEqual(Campaign.status_for(3, 0), Campaign.STATUS_COMPLETED)

    def test_sync_status_persists_change(self):
        manager = TestDataFactory.create_manager()
        campaign = TestDataFactory.create_campaign(
            manager, lead_statuses=(CampaignLead.STATUS_CONTACTED, CampaignLead.STATUS_HOT)
        )
        self.assertEqual(campaign.sync_status(), Campaign.STATUS_COMPLETED)
        campaign.refresh_from_db()
        self.assertEqual(campaign.status, Campaign.STATUS_COMPLETED)


class CampaignAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.manager = TestDataFactory.create_manager()
        self.other = TestDataFactory.create_manager()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_campaign_with_leads(self):
        data = {
            'name': 'Gulberg salons',
            'assigned_to': self.manager.id,
            'leads': [
                {'name': 'Glow Studio', 'phone': '042111', 'website': 'https://glow.pk', 'email': ''},
                {'name': 'Cut & Style'},
            ],
        }
        response = self.client.post('/api/v1/campaigns/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Campaign created successfully')
        self.assertEqual(response.data['leads_count'], 2)
        self.assertEqual(response.data['campaign']['lead_count'], 2)
        self.assertEqual(response.data['campaign']['status'], Campaign.STATUS_PENDING)

        lead = CampaignLead.objects.get(name='Glow Studio')
        self.assertEqual(lead.email, 'N/A')
        self.assertEqual(lead.status, CampaignLead.STATUS_PENDING)
        self.assertEqual(CampaignLead.objects.get(name='Cut & Style').phone, 'N/A')

    def test_create_requires_leads_and_manager(self):
        response = self.client.post(
            '/api/v1/campaigns/', {'name': 'Empty', 'assigned_to': self.manager.id, 'leads': []}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('leads', response.data)

        data = {'name': 'X', 'assigned_to': self.admin.id, 'leads': [{'name': 'A'}]}
        response = self.client.post('/api/v1/campaigns/', data, format='json')
        self.assertEqual(response.data['error'], 'Campaign can only be assigned to a manager')

    def test_manager_cannot_create(self):
        self.client.authenticate_user(self.manager)
        data = {'name': 'X', 'assigned_to': self.manager.id, 'leads': [{'name': 'A'}]}
        response = self.client.post('/api/v1/campaigns/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Only admins can create campaigns')

    def test_list_syncs_status_and_scopes_managers(self):
        done = TestDataFactory.create_campaign(self.manager, lead_statuses=(CampaignLead.STATUS_CONTACTED,))
        TestDataFactory.create_campaign(self.other)

        response = self.client.get('/api/v1/campaigns/')
        self.assertEqual(len(response.data), 2)

        self.client.authenticate_user(self.manager)
        response = self.client.get('/api/v1/campaigns/')
        self.assertEqual([c['id'] for c in response.data], [done.id])
        self.assertEqual(response.data[0]['status'], Campaign.STATUS_COMPLETED)
        self.assertEqual(response.data[0]['lead_count'], 1)

    def test_detail_access(self):
        campaign = TestDataFactory.create_campaign(self.manager, lead_statuses=('pending', 'hot'))

        self.client.authenticate_user(self.manager)
        response = self.client.get(f'/api/v1/campaigns/{campaign.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['leads']), 2)

        self.client.authenticate_user(self.other)
        response = self.client.get(f'/api/v1/campaigns/{campaign.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_reassign_and_delete(self):
        campaign = TestDataFactory.create_campaign(self.manager)

        response = self.client.put(f'/api/v1/campaigns/{campaign.id}/', {'assigned_to': self.other.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['assigned_to']['id'], self.other.id)

        self.client.authenticate_user(self.other)
        response = self.client.delete(f'/api/v1/campaigns/{campaign.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/v1/campaigns/{campaign.id}/')
        self.assertEqual(response.data, {'message': 'Campaign deleted successfully'})
        self.assertFalse(CampaignLead.objects.exists())


class CampaignLeadAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.manager = TestDataFactory.create_manager()
        self.other = TestDataFactory.create_manager()
        self.campaign = TestDataFactory.create_campaign(self.manager, lead_statuses=('pending', 'hot'))
        self.foreign_campaign = TestDataFactory.create_campaign(self.other, lead_statuses=('pending',))
        self.lead = self.campaign.leads.get(status='pending')
        self.client = AuthenticatedAPIClient()

    def test_leads_all_for_manager(self):
        self.client.authenticate_user(self.manager)
        response = self.client.get('/api/v1/campaigns/leads/all/')
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/v1/campaigns/leads/all/', {'status': 'hot'})
        self.assertEqual([lead['status'] for lead in response.data], ['hot'])

        response = self.client.get('/api/v1/campaigns/leads/all/', {'campaign_id': self.foreign_campaign.id})
        self.assertEqual(response.data, [])

    def test_leads_all_for_admin(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/campaigns/leads/all/')
        self.assertEqual(len(response.data), 3)

        response = self.client.get('/api/v1/campaigns/leads/all/', {'manager_id': self.other.id})
        self.assertEqual([lead['campaign']['id'] for lead in response.data], [self.foreign_campaign.id])

        response = self.client.get('/api/v1/campaigns/leads/all/', {'status': 'unknown'})
        self.assertEqual(len(response.data), 3)

    def test_update_status_completes_campaign(self):
        self.client.authenticate_user(self.manager)
        response = self.client.put(f'/api/v1/campaigns/leads/{self.lead.id}/', {'status': 'contacted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'contacted')
        self.campaign.refresh_from_db()
        self.assertEqual(self.campaign.status, Campaign.STATUS_COMPLETED)

    def test_update_status_validation_and_access(self):
        self.client.authenticate_user(self.other)
        response = self.client.put(f'/api/v1/campaigns/leads/{self.lead.id}/', {'status': 'done'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Valid status is required (pending, contacted, NA, hot)')

        response = self.client.put(f'/api/v1/campaigns/leads/{self.lead.id}/', {'status': 'NA'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.put('/api/v1/campaigns/leads/99999/', {'status': 'NA'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Lead not found')

    def test_add_remark(self):
        self.client.authenticate_user(self.manager)
        url = f'/api/v1/campaigns/leads/{self.lead.id}/remarks/'
        response = self.client.post(url, {'text': 'Asked to call after Eid'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['remarks'][0]['text'], 'Asked to call after Eid')
        self.assertEqual(response.data['remarks'][0]['added_by']['id'], self.manager.id)

        response = self.client.post(url, {'text': ''}, format='json')
        self.assertEqual(response.data['error'], 'Remark text is required')
