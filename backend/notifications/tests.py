"""
Test suite for notifications
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import Notification
from .utils import create_notification


class CreateNotificationTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.manager = TestDataFactory.create_manager(name='Sara')
        self.task = TestDataFactory.create_task(self.manager, created_by=self.admin, number='T-1')

    def test_skips_triggering_user_and_duplicates(self):
        created = create_notification(
            Notification.TYPE_COMMENT, self.task, self.manager, [self.admin, self.manager, self.admin, None]
        )
        self.assertEqual(len(created), 1)
        notification = Notification.objects.get()
        self.assertEqual(notification.target_user, self.admin)
        self.assertEqual(notification.message, 'Sara commented on task T-1')
        self.assertFalse(notification.is_read)

    def test_single_target_and_custom_message(self):
        create_notification(Notification.TYPE_STATUS_CHANGE, self.task, self.admin, self.manager,
                            message='Task T-1 closed', metadata={'new_status': 'CLOSED'})
        notification = Notification.objects.get(target_user=self.manager)
        self.assertEqual(notification.message, 'Task T-1 closed')
        self.assertEqual(notification.metadata, {'new_status': 'CLOSED'})

    def test_no_recipients(self):
        self.assertEqual(create_notification(Notification.TYPE_ASSIGNMENT, self.task, self.admin, None), [])
        self.assertEqual(create_notification(Notification.TYPE_ASSIGNMENT, self.task, self.admin, self.admin), [])
        self.assertFalse(Notification.objects.exists())


class NotificationAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.manager = TestDataFactory.create_manager()
        self.other = TestDataFactory.create_manager()
        self.task = TestDataFactory.create_task(self.manager, created_by=self.admin)
        create_notification(Notification.TYPE_ASSIGNMENT, self.task, self.admin, self.manager)
        create_notification(Notification.TYPE_COMMENT, self.task, self.admin, self.manager)
        create_notification(Notification.TYPE_COMMENT, self.task, self.admin, self.other)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def test_list_only_own_newest_first(self):
        response = self.client.get('/api/v1/notifications/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([n['type'] for n in response.data], ['COMMENT', 'ASSIGNMENT'])
        self.assertEqual(response.data[0]['task']['number'], self.task.number)
        self.assertEqual(response.data[0]['triggered_by']['id'], self.admin.id)
        self.assertFalse(response.data[0]['read'])

    def test_unread_count_and_mark_all_read(self):
        response = self.client.get('/api/v1/notifications/count/')
        self.assertEqual(response.data, {'count': 2})

        response = self.client.put('/api/v1/notifications/read/')
        self.assertEqual(response.data['updated'], 2)

        response = self.client.get('/api/v1/notifications/count/')
        self.assertEqual(response.data, {'count': 0})
        self.assertFalse(Notification.objects.get(target_user=self.other).is_read)

    def test_mark_one_read(self):
        notification = Notification.objects.filter(target_user=self.manager).first()
        response = self.client.put(f'/api/v1/notifications/{notification.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['read'])
        self.assertIsNotNone(response.data['read_at'])

    def test_cannot_mark_someone_elses(self):
        notification = Notification.objects.get(target_user=self.other)
        response = self.client.put(f'/api/v1/notifications/{notification.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Notification not found')

    def test_clear_all(self):
        response = self.client.delete('/api/v1/notifications/')
        self.assertEqual(response.data, {'message': 'All notifications cleared', 'deleted': 2})
        self.assertEqual(Notification.objects.count(), 1)
