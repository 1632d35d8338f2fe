"""
Test suite for dashboard metrics and date range resolution
"""
from datetime import datetime, timedelta
from django.core.cache import cache
from django.test import TestCase, SimpleTestCase
from django.utils import timezone
from rest_framework import status
from backend.core.cache_utils import get_cached_dashboard_metrics, cache_dashboard_metrics
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.leads.models import Lead, LeadRemark, LeadStatusChange
from .utils import get_date_range


class DateRangeTests(SimpleTestCase):

    def setUp(self):
        # Wednesday
        self.now = timezone.make_aware(datetime(2024, 5, 15, 12, 30))

    def local_midnight(self, year, month, day):
        return timezone.make_aware(datetime(year, month, day))

    def test_today(self):
        start, end = get_date_range('today', now=self.now)
        self.assertEqual(start, self.local_midnight(2024, 5, 15))
        self.assertEqual(end, self.local_midnight(2024, 5, 16))

    def test_week_starts_on_sunday(self):
        start, end = get_date_range('thisweek', now=self.now)
        self.assertEqual(start, self.local_midnight(2024, 5, 12))
        self.assertEqual(end, self.local_midnight(2024, 5, 16))

    def test_week_on_a_sunday(self):
        sunday = timezone.make_aware(datetime(2024, 5, 12, 9, 0))
        start, end = get_date_range('thisweek', now=sunday)
        self.assertEqual(start, self.local_midnight(2024, 5, 12))
        self.assertEqual(end, self.local_midnight(2024, 5, 13))

    def test_month_covers_whole_month(self):
        start, end = get_date_range('thismonth', now=self.now)
        self.assertEqual(start, self.local_midnight(2024, 5, 1))
        self.assertEqual(end, self.local_midnight(2024, 6, 1))

    def test_custom_includes_last_day(self):
        start, end = get_date_range('custom', '2024-01-10', '2024-01-12', now=self.now)
        self.assertEqual(start, self.local_midnight(2024, 1, 10))
        self.assertEqual(end, self.local_midnight(2024, 1, 13))

    def test_custom_errors(self):
        with self.assertRaisesMessage(ValueError, 'from and to dates are required'):
            get_date_range('custom', '2024-01-10', None)
        with self.assertRaisesMessage(ValueError, 'Invalid date format'):
            get_date_range('custom', '10/01/2024', '2024-01-12')
        with self.assertRaisesMessage(ValueError, 'from date must not be after to date'):
            get_date_range('custom', '2024-01-12', '2024-01-10')

    def test_unknown_range(self):
        with self.assertRaises(ValueError):
            get_date_range('yesterday', now=self.now)


class DashboardMetricsTests(TestCase):

    def setUp(self):
        cache.clear()
        self.project = TestDataFactory.create_project()
        self.other_project = TestDataFactory.create_project()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def get_metrics(self, **params):
        return self.client.get('/api/v1/dashboard/metrics/', params)

    def test_counts_today(self):
        visited = TestDataFactory.create_lead(self.project)
        chatted = TestDataFactory.create_lead(self.project)
        TestDataFactory.create_lead(self.other_project)

        visited.record_status(Lead.STATUS_VISITED, self.admin)
        chatted.add_remark('Called', self.admin)
        chatted.add_remark('Called again', self.admin)

        response = self.get_metrics(project_id=self.project.id, range='today')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'contacts_added': 2, 'chats_updated': 1, 'visits': 1})

    def test_old_activity_excluded(self):
        lead = TestDataFactory.create_lead(self.project)
        lead.add_remark('Old call', self.admin)
        lead.record_status(Lead.STATUS_VISITED, self.admin)
        past = timezone.now() - timedelta(days=40)
        Lead.objects.filter(pk=lead.pk).update(created_at=past)
        LeadRemark.objects.filter(lead=lead).update(timestamp=past)
        LeadStatusChange.objects.filter(lead=lead).update(timestamp=past)
        cache.clear()

        response = self.get_metrics(project_id=self.project.id, range='today')
        self.assertEqual(response.data, {'contacts_added': 0, 'chats_updated': 0, 'visits': 0})

    def test_cache_invalidated_when_lead_added(self):
        response = self.get_metrics(project_id=self.project.id, range='today')
        self.assertEqual(response.data['contacts_added'], 0)

        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_lead(self.project)
        response = self.get_metrics(project_id=self.project.id, range='today')
        self.assertEqual(response.data['contacts_added'], 1)

    def test_counts_cached_before_commit_are_discarded(self):
        start, end = get_date_range('today')
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            TestDataFactory.create_lead(self.project)
            # A concurrent reader caches the pre-commit counts
            _, cache_key = get_cached_dashboard_metrics(self.project.id, 'today', start, end)
            cache_dashboard_metrics(cache_key, {'contacts_added': 0, 'chats_updated': 0, 'visits': 0})
            self.assertIsNotNone(cache.get(cache_key))
        self.assertGreaterEqual(len(callbacks), 1)

        response = self.get_metrics(project_id=self.project.id, range='today')
        self.assertEqual(response.data['contacts_added'], 1)

    def test_admin_requires_project(self):
        response = self.get_metrics(range='today')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'project_id is required for admin')

        response = self.get_metrics(project_id=99999, range='today')
        self.assertEqual(response.data['error'], 'Project not found')

    def test_range_validation(self):
        response = self.get_metrics(project_id=self.project.id)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('range parameter is required', response.data['error'])

        response = self.get_metrics(project_id=self.project.id, range='custom', **{'from': '2024-01-01'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.get_metrics(project_id=self.project.id, range='fortnight')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_manager_without_projects_gets_zeros(self):
        self.client.authenticate_user(TestDataFactory.create_manager())
        response = self.get_metrics(range='today')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'contacts_added': 0, 'chats_updated': 0, 'visits': 0})

    def test_manager_single_project_is_implicit(self):
        TestDataFactory.create_lead(self.project)
        self.client.authenticate_user(TestDataFactory.create_manager(projects=[self.project]))
        response = self.get_metrics(range='today')
        self.assertEqual(response.data['contacts_added'], 1)

    def test_manager_with_several_projects_must_choose(self):
        manager = TestDataFactory.create_manager(projects=[self.project, self.other_project])
        TestDataFactory.create_lead(self.other_project)
        self.client.authenticate_user(manager)

        response = self.get_metrics(range='today')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'project_id is required when manager has multiple projects')

        response = self.get_metrics(project_id=self.other_project.id, range='today')
        self.assertEqual(response.data['contacts_added'], 1)
