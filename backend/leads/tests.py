"""
Test suite for leads: project scoping, filters, status history and remarks
"""
from datetime import timedelta
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.leads.models import Lead


class LeadCreateTests(TestCase):

    def setUp(self):
        self.project = TestDataFactory.create_project()
        self.other_project = TestDataFactory.create_project()
        self.manager = TestDataFactory.create_manager(projects=[self.project])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def test_create_records_initial_status_and_remark(self):
        data = {'project_id': self.project.id, 'name': ' Ahmed ', 'contact_no': '03001234567',
                'remark': 'Wants a shop near the main road'}
        response = self.client.post('/api/v1/leads/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Ahmed')
        self.assertEqual(response.data['status'], 'fresh')
        self.assertEqual([h['status'] for h in response.data['status_history']], ['fresh'])
        self.assertEqual(response.data['remarks'][0]['text'], 'Wants a shop near the main road')
        self.assertEqual(response.data['remarks'][0]['added_by']['email'], self.manager.email)

    def test_create_requires_name_and_contact(self):
        response = self.client.post('/api/v1/leads/', {'project_id': self.project.id, 'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('contact_no', response.data)

    def test_create_unknown_project(self):
        data = {'project_id': 99999, 'name': 'X', 'contact_no': '1'}
        response = self.client.post('/api/v1/leads/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Project not found')

    def test_manager_cannot_create_for_other_project(self):
        data = {'project_id': self.other_project.id, 'name': 'X', 'contact_no': '1'}
        response = self.client.post('/api/v1/leads/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_can_create_for_any_project(self):
        self.client.authenticate_user(TestDataFactory.create_admin())
        data = {'project_id': self.other_project.id, 'name': 'X', 'contact_no': '1', 'status': 'hot'}
        response = self.client.post('/api/v1/leads/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'hot')


class LeadListTests(TestCase):

    def setUp(self):
        self.project_a = TestDataFactory.create_project()
        self.project_b = TestDataFactory.create_project()
        self.lead_a = TestDataFactory.create_lead(self.project_a, name='Bilal Traders', contact_no='03001111111')
        self.lead_b = TestDataFactory.create_lead(self.project_b, name='Kamran', contact_no='03002222222')
        self.client = AuthenticatedAPIClient()

    def test_admin_must_pass_project(self):
        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.get('/api/v1/leads/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'project_id query parameter is required for admin')

        response = self.client.get('/api/v1/leads/', {'project_id': self.project_b.id})
        self.assertEqual([lead['id'] for lead in response.data], [self.lead_b.id])

    def test_manager_without_projects_gets_empty_list(self):
        self.client.authenticate_user(TestDataFactory.create_manager())
        response = self.client.get('/api/v1/leads/')
        self.assertEqual(response.data, [])

    def test_manager_with_several_projects_sees_all_of_them(self):
        manager = TestDataFactory.create_manager(projects=[self.project_a, self.project_b])
        self.client.authenticate_user(manager)
        response = self.client.get('/api/v1/leads/')
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/v1/leads/', {'project_id': self.project_a.id})
        self.assertEqual([lead['id'] for lead in response.data], [self.lead_a.id])

    def test_manager_foreign_project_falls_back_to_own(self):
        manager = TestDataFactory.create_manager(projects=[self.project_a])
        self.client.authenticate_user(manager)
        response = self.client.get('/api/v1/leads/', {'project_id': self.project_b.id})
        self.assertEqual([lead['id'] for lead in response.data], [self.lead_a.id])

    def test_search_matches_remark_text(self):
        self.lead_a.add_remark('Interested in corner SHOP', None)
        TestDataFactory.create_lead(self.project_a, name='Someone else')
        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.get('/api/v1/leads/', {'project_id': self.project_a.id, 'search': 'corner shop'})
        self.assertEqual([lead['id'] for lead in response.data], [self.lead_a.id])

    def test_filter_by_status_and_created_date(self):
        hot = TestDataFactory.create_lead(self.project_a, status='hot')
        Lead.objects.filter(pk=hot.pk).update(created_at=timezone.now() - timedelta(days=10))
        self.client.authenticate_user(TestDataFactory.create_admin())

        response = self.client.get('/api/v1/leads/', {'project_id': self.project_a.id, 'status': 'hot'})
        self.assertEqual([lead['id'] for lead in response.data], [hot.id])

        today = timezone.localdate().isoformat()
        response = self.client.get('/api/v1/leads/', {'project_id': self.project_a.id, 'created_from': today})
        self.assertEqual([lead['id'] for lead in response.data], [self.lead_a.id])

    def test_newest_first(self):
        newer = TestDataFactory.create_lead(self.project_a)
        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.get('/api/v1/leads/', {'project_id': self.project_a.id})
        self.assertEqual([lead['id'] for lead in response.data], [newer.id, self.lead_a.id])


class LeadUpdateTests(TestCase):

    def setUp(self):
        self.project = TestDataFactory.create_project()
        self.manager = TestDataFactory.create_manager(projects=[self.project])
        self.lead = TestDataFactory.create_lead(self.project)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def test_status_change_appends_history(self):
        before = self.lead.last_updated_at
        response = self.client.patch(
            f'/api/v1/leads/{self.lead.id}/', {'status': 'visited', 'remark': 'Came to the site'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([h['status'] for h in response.data['status_history']], ['fresh', 'visited'])
        self.assertEqual(len(response.data['remarks']), 1)
        self.lead.refresh_from_db()
        self.assertGreaterEqual(self.lead.last_updated_at, before)

    def test_same_status_adds_no_history(self):
        response = self.client.put(f'/api/v1/leads/{self.lead.id}/', {'status': 'fresh'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['status_history']), 1)

    def test_invalid_status_rejected(self):
        response = self.client.patch(f'/api/v1/leads/{self.lead.id}/', {'status': 'lost'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_manager_cannot_touch_foreign_lead(self):
        foreign = TestDataFactory.create_lead(TestDataFactory.create_project())
        response = self.client.patch(f'/api/v1/leads/{foreign.id}/', {'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_add_remark(self):
        response = self.client.post(f'/api/v1/leads/{self.lead.id}/remarks/', {'text': '  Called back  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['remarks'][-1]['text'], 'Called back')

    def test_add_empty_remark_rejected(self):
        response = self.client.post(f'/api/v1/leads/{self.lead.id}/remarks/', {'text': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Remark text is required')

    def test_delete_is_admin_only(self):
        response = self.client.delete(f'/api/v1/leads/{self.lead.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.delete(f'/api/v1/leads/{self.lead.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Lead.objects.filter(pk=self.lead.id).exists())
