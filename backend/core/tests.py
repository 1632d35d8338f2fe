"""
Test suite for core: authentication, users, activity log and the admin command
"""
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken
from backend.core.models import User, ActivityLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import log_activity


class UserModelTests(TestCase):
    """Test the email-based user model"""

    def test_email_is_lowercased_on_save(self):
        user = TestDataFactory.create_user(email='Mixed.Case@Test.com')
        self.assertEqual(user.email, 'mixed.case@test.com')

    def test_create_user_defaults_to_manager(self):
        user = User.objects.create_user(email='m@test.com', password='secret1', name='M')
        self.assertEqual(user.role, User.ROLE_MANAGER)
        self.assertTrue(user.is_manager)
        self.assertFalse(user.is_staff)

    def test_create_superuser_is_admin(self):
        user = User.objects.create_superuser(email='a@test.com', password='secret1', name='A')
        self.assertTrue(user.is_admin)
        self.assertTrue(user.is_superuser)


class AuthTests(TestCase):
    """Test login, refresh and the current-user endpoint"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.project = TestDataFactory.create_project()
        self.manager = TestDataFactory.create_manager(
            email='manager@test.com', password='secret123', name='Manager One', projects=[self.project]
        )

    def test_login_is_case_insensitive(self):
        response = self.client.post(
            '/api/v1/auth/login/', {'email': 'MANAGER@Test.com', 'password': 'secret123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['email'], 'manager@test.com')
        self.assertEqual(response.data['user']['project_ids'], [self.project.id])

    def test_login_records_activity(self):
        self.client.post('/api/v1/auth/login/', {'email': 'manager@test.com', 'password': 'secret123'}, format='json')
        self.assertTrue(ActivityLog.objects.filter(action='login', user=self.manager).exists())

    def test_login_wrong_password(self):
        response = self.client.post(
            '/api/v1/auth/login/', {'email': 'manager@test.com', 'password': 'wrong'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error'], 'Invalid email or password')

    def test_login_missing_fields(self):
        response = self.client.post('/api/v1/auth/login/', {'email': 'manager@test.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_token_carries_role_claims(self):
        response = self.client.post(
            '/api/v1/auth/login/', {'email': 'manager@test.com', 'password': 'secret123'}, format='json'
        )
        token = RefreshToken(response.data['refresh'])
        self.assertEqual(token['role'], User.ROLE_MANAGER)
        self.assertEqual(token['email'], 'manager@test.com')
        self.assertEqual(token['name'], 'Manager One')

    def test_refresh_returns_access_token(self):
        refresh = RefreshToken.for_user(self.manager)
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': str(refresh)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_for_deleted_user_is_invalid(self):
        refresh = str(RefreshToken.for_user(self.manager))
        self.manager.delete()
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_includes_admin_flag(self):
        self.client.authenticate_user(self.manager)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_admin'])
        self.assertEqual(response.data['projects'], [{'id': self.project.id, 'name': self.project.name}])

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('error', response.data)

    def test_health_is_public(self):
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'ok': True, 'service': 'realprop-backend'})


class UserAPITests(TestCase):
    """Test admin user management"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin(email='admin@test.com')
        self.project = TestDataFactory.create_project()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_manager_with_project(self):
        data = {'name': 'New Manager', 'email': 'New@Test.com', 'password': 'secret123',
                'role': 'manager', 'project_id': self.project.id}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['email'], 'new@test.com')
        self.assertEqual(response.data['project_ids'], [self.project.id])
        self.assertNotIn('password', response.data)

    def test_create_manager_requires_project(self):
        data = {'name': 'New Manager', 'email': 'new@test.com', 'password': 'secret123'}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('project_id', response.data)

    def test_create_with_unknown_project(self):
        data = {'name': 'New Manager', 'email': 'new@test.com', 'password': 'secret123', 'project_id': 99999}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('project_id', response.data)

    def test_create_admin_without_project(self):
        data = {'name': 'Second Admin', 'email': 'admin2@test.com', 'password': 'secret123', 'role': 'admin'}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['role'], 'admin')

    def test_admin_is_never_assigned_a_project(self):
        data = {'name': 'Second Admin', 'email': 'admin2@test.com', 'password': 'secret123', 'role': 'admin',
                'project_id': self.project.id}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['project_ids'], [])

    def test_promoting_manager_to_admin_drops_projects(self):
        manager = TestDataFactory.create_manager(projects=[self.project])
        response = self.client.patch(f'/api/v1/users/{manager.id}/', {'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['project_ids'], [])

    def test_duplicate_email_rejected(self):
        data = {'name': 'Dup', 'email': 'ADMIN@test.com', 'password': 'secret123', 'role': 'admin'}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data['email'][0]), 'Email already exists')

    def test_invalid_role_rejected(self):
        data = {'name': 'X', 'email': 'x@test.com', 'password': 'secret123', 'role': 'owner'}
        response = self.client.post('/api/v1/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('role', response.data)

    def test_update_replaces_project_and_password(self):
        other_project = TestDataFactory.create_project()
        manager = TestDataFactory.create_manager(projects=[self.project])
        response = self.client.put(
            f'/api/v1/users/{manager.id}/',
            {'project_id': other_project.id, 'password': 'newsecret'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['project_ids'], [other_project.id])
        manager.refresh_from_db()
        self.assertTrue(manager.check_password('newsecret'))

    def test_update_cannot_leave_manager_without_project(self):
        manager = TestDataFactory.create_manager(projects=[self.project])
        response = self.client.patch(f'/api/v1/users/{manager.id}/', {'project_id': None}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_delete_self(self):
        response = self.client.delete(f'/api/v1/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Cannot delete your own account')

    def test_delete_user(self):
        manager = TestDataFactory.create_manager(projects=[self.project])
        response = self.client.delete(f'/api/v1/users/{manager.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.filter(pk=manager.id).exists())

    def test_manager_cannot_list_users(self):
        manager = TestDataFactory.create_manager(projects=[self.project])
        self.client.authenticate_user(manager)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Admin access required')


class ActivityLogTests(TestCase):
    """Test activity logging and its read-only API"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_log_activity_without_request(self):
        entry = log_activity(action='create', model_name='Lead', object_id=5, user=self.admin, object_name='Ali')
        self.assertIsNotNone(entry)
        self.assertEqual(entry.object_id, '5')
        self.assertIsNone(entry.ip_address)

    def test_log_activity_skips_incomplete_entries(self):
        self.assertIsNone(log_activity(action='create', model_name='Lead'))
        self.assertEqual(ActivityLog.objects.count(), 0)

    def test_filter_by_action_and_model(self):
        log_activity(action='create', model_name='Lead', object_id=1, user=self.admin)
        log_activity(action='delete', model_name='Lead', object_id=2, user=self.admin)
        log_activity(action='create', model_name='Task', object_id=3, user=self.admin)

        response = self.client.get('/api/v1/activity-logs/', {'action': 'create', 'model': 'lead'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['object_id'], '1')

    def test_invalid_date_filter(self):
        response = self.client.get('/api/v1/activity-logs/', {'date_from': '01-01-2025'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid date format. Use YYYY-MM-DD')


class CreateAdminCommandTests(TestCase):
    """Test the create_admin management command"""

    def test_creates_admin(self):
        call_command('create_admin', email='Boss@Test.com', password='secret123', name='Boss', stdout=StringIO())
        user = User.objects.get(email='boss@test.com')
        self.assertTrue(user.is_admin)
        self.assertTrue(user.check_password('secret123'))

    def test_resets_existing_user(self):
        user = TestDataFactory.create_manager(email='boss@test.com')
        call_command('create_admin', email='boss@test.com', password='another1', stdout=StringIO())
        user.refresh_from_db()
        self.assertEqual(user.role, User.ROLE_ADMIN)
        self.assertTrue(user.check_password('another1'))

    def test_reset_grants_staff_and_superuser(self):
        project = TestDataFactory.create_project()
        user = TestDataFactory.create_manager(email='boss@test.com', projects=[project])
        call_command('create_admin', email='boss@test.com', password='another1', stdout=StringIO())
        user.refresh_from_db()
        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_superuser)
        self.assertFalse(user.projects.exists())

    def test_rejects_short_password(self):
        with self.assertRaises(CommandError):
            call_command('create_admin', email='boss@test.com', password='123', stdout=StringIO())
