"""
Test suite for projects: visibility, admin-only writes, manager assignment and seeding
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.projects.models import Project
from backend.projects.views import SAMPLE_PROJECTS


class ProjectAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_project_with_manager(self):
        manager = TestDataFactory.create_manager()
        data = {'name': '  Blue Area Tower ', 'location': 'Islamabad', 'manager_id': manager.id}
        response = self.client.post('/api/v1/projects/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Blue Area Tower')
        self.assertEqual(response.data['manager']['id'], manager.id)
        self.assertEqual(list(manager.projects.values_list('id', flat=True)), [response.data['id']])

    def test_create_requires_name_and_location(self):
        response = self.client.post('/api/v1/projects/', {'name': 'Only name'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('location', response.data)

    def test_create_with_non_manager_rejected(self):
        other_admin = TestDataFactory.create_admin()
        data = {'name': 'P', 'location': 'L', 'manager_id': other_admin.id}
        response = self.client.post('/api/v1/projects/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'User is not a manager')

    def test_create_with_unknown_manager_rejected(self):
        data = {'name': 'P', 'location': 'L', 'manager_id': 99999}
        response = self.client.post('/api/v1/projects/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Manager not found')

    def test_manager_cannot_create(self):
        manager = TestDataFactory.create_manager()
        self.client.authenticate_user(manager)
        response = self.client.post('/api/v1/projects/', {'name': 'P', 'location': 'L'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Only admin can create projects')

    def test_admin_sees_all_manager_sees_assigned(self):
        assigned = TestDataFactory.create_project(name='Assigned')
        TestDataFactory.create_project(name='Other')
        manager = TestDataFactory.create_manager(projects=[assigned])

        response = self.client.get('/api/v1/projects/')
        self.assertEqual(len(response.data), 2)

        self.client.authenticate_user(manager)
        response = self.client.get('/api/v1/projects/')
        self.assertEqual([p['name'] for p in response.data], ['Assigned'])

    def test_admin_member_is_not_reported_as_manager(self):
        project = TestDataFactory.create_project(managers=[TestDataFactory.create_admin()])
        response = self.client.get(f'/api/v1/projects/{project.id}/')
        self.assertIsNone(response.data['manager'])

        manager = TestDataFactory.create_manager(projects=[project])
        response = self.client.get(f'/api/v1/projects/{project.id}/')
        self.assertEqual(response.data['manager']['id'], manager.id)

    def test_manager_without_projects_gets_empty_list(self):
        TestDataFactory.create_project()
        manager = TestDataFactory.create_manager()
        self.client.authenticate_user(manager)
        response = self.client.get('/api/v1/projects/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_update_reassigns_manager(self):
        first = TestDataFactory.create_manager()
        second = TestDataFactory.create_manager()
        project = TestDataFactory.create_project(managers=[first])

        response = self.client.patch(f'/api/v1/projects/{project.id}/', {'manager_id': second.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['manager']['id'], second.id)
        self.assertFalse(first.projects.exists())

    def test_update_with_empty_manager_unassigns(self):
        manager = TestDataFactory.create_manager()
        project = TestDataFactory.create_project(managers=[manager])
        response = self.client.put(f'/api/v1/projects/{project.id}/', {'manager_id': None}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['manager'])

    def test_delete_removes_from_managers(self):
        manager = TestDataFactory.create_manager()
        project = TestDataFactory.create_project(managers=[manager])
        response = self.client.delete(f'/api/v1/projects/{project.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(manager.projects.exists())

    def test_manager_cannot_modify(self):
        manager = TestDataFactory.create_manager()
        project = TestDataFactory.create_project(managers=[manager])
        self.client.authenticate_user(manager)
        response = self.client.patch(f'/api/v1/projects/{project.id}/', {'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ProjectSeedTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_seed_empty_database(self):
        response = self.client.post('/api/v1/projects/seed/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['projects']), len(SAMPLE_PROJECTS))
        self.assertEqual(Project.objects.count(), len(SAMPLE_PROJECTS))

    def test_seed_refuses_when_projects_exist(self):
        TestDataFactory.create_project()
        response = self.client.post('/api/v1/projects/seed/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['existing_count'], 1)

    def test_seed_with_clear_replaces_projects(self):
        old = TestDataFactory.create_project(name='Old')
        TestDataFactory.create_lead(old)
        response = self.client.post('/api/v1/projects/seed/?clear=true')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(Project.objects.filter(name='Old').exists())
        self.assertEqual(Project.objects.count(), len(SAMPLE_PROJECTS))

    def test_seed_is_admin_only(self):
        manager = TestDataFactory.create_manager()
        self.client.authenticate_user(manager)
        response = self.client.post('/api/v1/projects/seed/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
