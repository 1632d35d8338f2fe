"""
Test suite for tasks: assignment, status rules, comments and view marks
"""
from django.test import TestCase, SimpleTestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.notifications.models import Notification
from .models import Task
from .utils import build_comment_threads


class CommentThreadTests(SimpleTestCase):

    def test_nested_replies_collapse_into_root(self):
        comments = [
            {'id': 1, 'text': 'a', 'parent_comment_id': None},
            {'id': 2, 'text': 'b', 'parent_comment_id': 1},
            {'id': 3, 'text': 'c', 'parent_comment_id': None},
            {'id': 4, 'text': 'd', 'parent_comment_id': 2},
            {'id': 5, 'text': 'e', 'parent_comment_id': 99},
        ]
        threads = build_comment_threads(comments)
        self.assertEqual([t['id'] for t in threads], [1, 3, 5])
        self.assertEqual([r['id'] for r in threads[0]['replies']], [2, 4])
        self.assertEqual(threads[1]['replies'], [])


class TaskCreateTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin(name='Boss')
        self.project = TestDataFactory.create_project()
        self.manager = TestDataFactory.create_manager(projects=[self.project])
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_auto_assigns_single_project_and_notifies(self):
        lead = TestDataFactory.create_lead(self.project)
        data = {'number': ' T-100 ', 'description': 'Call the buyer', 'assigned_to': self.manager.id,
                'lead_id': lead.id}
        response = self.client.post('/api/v1/tasks/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['number'], 'T-100')
        self.assertEqual(response.data['status'], Task.STATUS_OPEN)
        self.assertEqual(response.data['project']['id'], self.project.id)
        self.assertEqual(response.data['lead']['id'], lead.id)
        self.assertEqual(response.data['assigned_to']['role'], 'manager')

        notification = Notification.objects.get(target_user=self.manager)
        self.assertEqual(notification.notification_type, Notification.TYPE_ASSIGNMENT)
        self.assertEqual(notification.message, 'Boss assigned task T-100 to you')

    def test_manager_with_several_projects_needs_project(self):
        self.manager.projects.add(TestDataFactory.create_project())
        response = self.client.post('/api/v1/tasks/', {'number': 'T-1', 'assigned_to': self.manager.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'project_id is required when manager has multiple projects')

        data = {'number': 'T-1', 'assigned_to': self.manager.id, 'project_id': self.project.id}
        response = self.client.post('/api/v1/tasks/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_project_must_belong_to_assignee(self):
        other = TestDataFactory.create_project()
        data = {'number': 'T-1', 'assigned_to': self.manager.id, 'project_id': other.id}
        response = self.client.post('/api/v1/tasks/', data, format='json')
        self.assertEqual(response.data['error'], 'Manager does not have access to this project')

    def test_assignee_must_be_manager(self):
        response = self.client.post('/api/v1/tasks/', {'number': 'T-1', 'assigned_to': self.admin.id}, format='json')
        self.assertEqual(response.data['error'], 'Tasks can only be assigned to managers')

        response = self.client.post('/api/v1/tasks/', {'number': 'T-1', 'assigned_to': 99999}, format='json')
        self.assertEqual(response.data['error'], 'Assigned user not found')

    def test_number_unique_among_active_tasks(self):
        TestDataFactory.create_task(self.manager, number='T-7')
        response = self.client.post('/api/v1/tasks/', {'number': 'T-7', 'assigned_to': self.manager.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'A task with number "T-7" already exists')

        Task.objects.filter(number='T-7').update(status=Task.STATUS_CLOSED)
        response = self.client.post('/api/v1/tasks/', {'number': 'T-7', 'assigned_to': self.manager.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_unknown_lead(self):
        data = {'number': 'T-1', 'assigned_to': self.manager.id, 'lead_id': 99999}
        response = self.client.post('/api/v1/tasks/', data, format='json')
        self.assertEqual(response.data['error'], 'Lead not found')

    def test_manager_cannot_create(self):
        self.client.authenticate_user(self.manager)
        response = self.client.post('/api/v1/tasks/', {'number': 'T-1', 'assigned_to': self.manager.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Only admin can create tasks')


class TaskAccessTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.manager = TestDataFactory.create_manager()
        self.other = TestDataFactory.create_manager()
        self.task = TestDataFactory.create_task(self.manager, created_by=self.admin)
        self.foreign_task = TestDataFactory.create_task(self.other, created_by=self.admin)
        self.client = AuthenticatedAPIClient()

    def test_manager_lists_only_own_tasks(self):
        self.client.authenticate_user(self.manager)
        response = self.client.get('/api/v1/tasks/')
        self.assertEqual([t['id'] for t in response.data], [self.task.id])

        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/tasks/')
        self.assertEqual(len(response.data), 2)

    def test_manager_cannot_view_foreign_task(self):
        self.client.authenticate_user(self.manager)
        response = self.client.get(f'/api/v1/tasks/{self.foreign_task.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.get(f'/api/v1/tasks/{self.task.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('comment_threads', response.data)

    def test_manager_cannot_modify(self):
        self.client.authenticate_user(self.manager)
        response = self.client.patch(f'/api/v1/tasks/{self.task.id}/', {'description': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.delete(f'/api/v1/tasks/{self.task.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_reassigns_through_update(self):
        self.client.authenticate_user(self.admin)
        response = self.client.patch(
            f'/api/v1/tasks/{self.task.id}/', {'assigned_to': self.other.id, 'description': 'New'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['assigned_to']['id'], self.other.id)
        self.assertEqual(response.data['description'], 'New')
        self.assertTrue(Notification.objects.filter(
            target_user=self.other, notification_type=Notification.TYPE_REASSIGNMENT
        ).exists())

    def test_admin_deletes(self):
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/v1/tasks/{self.task.id}/')
        self.assertEqual(response.data, {'message': 'Task deleted successfully'})
        self.assertFalse(Task.objects.filter(pk=self.task.id).exists())


class TaskStatusTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.manager = TestDataFactory.create_manager()
        self.task = TestDataFactory.create_task(self.manager, created_by=self.admin)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def set_status(self, new_status, task=None):
        task = task or self.task
        return self.client.put(f'/api/v1/tasks/{task.id}/status/', {'status': new_status}, format='json')

    def test_manager_completes_and_admin_is_notified(self):
        response = self.set_status(Task.STATUS_COMPLETED)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], Task.STATUS_COMPLETED)

        notification = Notification.objects.get(target_user=self.admin)
        self.assertEqual(notification.notification_type, Notification.TYPE_STATUS_CHANGE)
        self.assertEqual(notification.metadata, {'old_status': 'OPEN', 'new_status': 'COMPLETED'})
        self.assertFalse(Notification.objects.filter(target_user=self.manager).exists())

    def test_manager_limited_to_completed(self):
        response = self.set_status(Task.STATUS_IN_PROGRESS)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Managers can only set status to COMPLETED')

    def test_manager_cannot_touch_foreign_task(self):
        foreign = TestDataFactory.create_task(TestDataFactory.create_manager())
        response = self.set_status(Task.STATUS_COMPLETED, task=foreign)
        self.assertEqual(response.data['error'], 'Access denied')

    def test_invalid_status(self):
        response = self.set_status('DONE')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid status')

    def test_close_requires_completed(self):
        self.client.authenticate_user(self.admin)
        response = self.set_status(Task.STATUS_CLOSED)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Can only close tasks with COMPLETED status')

        Task.objects.filter(pk=self.task.pk).update(status=Task.STATUS_COMPLETED)
        response = self.set_status(Task.STATUS_CLOSED)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], Task.STATUS_CLOSED)

    def test_admin_can_cancel(self):
        self.client.authenticate_user(self.admin)
        response = self.set_status(Task.STATUS_CANCELLED)
        self.assertEqual(response.data['status'], Task.STATUS_CANCELLED)

    def test_same_status_sends_nothing(self):
        self.client.authenticate_user(self.admin)
        self.set_status(Task.STATUS_OPEN)
        self.assertFalse(Notification.objects.exists())


class TaskCommentTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.manager = TestDataFactory.create_manager()
        self.task = TestDataFactory.create_task(self.manager, created_by=self.admin)
        self.client = AuthenticatedAPIClient()

    def comment(self, text, parent_id=None):
        data = {'text': text}
        if parent_id:
            data['parent_comment_id'] = parent_id
        return self.client.post(f'/api/v1/tasks/{self.task.id}/comments/', data, format='json')

    def test_threaded_comments(self):
        self.client.authenticate_user(self.admin)
        response = self.comment('Any update?')
        parent_id = response.data['comments'][0]['id']

        self.client.authenticate_user(self.manager)
        response = self.comment('Visiting tomorrow', parent_id=parent_id)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        threads = response.data['comment_threads']
        self.assertEqual(len(threads), 1)
        self.assertEqual(threads[0]['replies'][0]['text'], 'Visiting tomorrow')
        self.assertEqual(threads[0]['replies'][0]['parent_comment_id'], parent_id)

    def test_comment_clears_other_sides_mark_and_notifies(self):
        self.client.authenticate_user(self.manager)
        self.client.put(f'/api/v1/tasks/{self.task.id}/view-comments/')
        self.client.authenticate_user(self.admin)
        self.client.put(f'/api/v1/tasks/{self.task.id}/view-comments/')
        self.task.refresh_from_db()
        self.assertIsNotNone(self.task.last_comments_viewed_by_manager)

        self.comment('Please call')
        self.task.refresh_from_db()
        self.assertIsNone(self.task.last_comments_viewed_by_manager)
        self.assertIsNotNone(self.task.last_comments_viewed_by_admin)
        self.assertTrue(Notification.objects.filter(
            target_user=self.manager, notification_type=Notification.TYPE_COMMENT
        ).exists())

    def test_validation(self):
        self.client.authenticate_user(self.admin)
        response = self.comment('  ')
        self.assertEqual(response.data['error'], 'Comment text is required')

        response = self.comment('Reply', parent_id=99999)
        self.assertEqual(response.data['error'], 'Parent comment not found')

        self.client.authenticate_user(TestDataFactory.create_manager())
        response = self.comment('Hello')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class TaskReassignAndBadgeTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.manager = TestDataFactory.create_manager()
        self.task = TestDataFactory.create_task(self.manager, created_by=self.admin)
        self.client = AuthenticatedAPIClient()

    def test_reassign_with_comment(self):
        self.client.authenticate_user(self.admin)
        response = self.client.put(f'/api/v1/tasks/{self.task.id}/reassign/', {'comment': 'Redo it'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], Task.STATUS_REASSIGNED)
        self.assertEqual(response.data['comments'][0]['text'], 'Redo it')
        self.assertIsNone(response.data['last_viewed_by_manager'])
        self.assertTrue(Notification.objects.filter(
            target_user=self.manager, notification_type=Notification.TYPE_REASSIGNMENT
        ).exists())

    def test_reassign_is_admin_only(self):
        self.client.authenticate_user(self.manager)
        response = self.client.put(f'/api/v1/tasks/{self.task.id}/reassign/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Admin access required')

    def test_manager_badge_clears_after_viewing(self):
        self.client.authenticate_user(self.manager)
        response = self.client.get('/api/v1/tasks/count/pending/')
        self.assertEqual(response.data, {'count': 1})

        response = self.client.put(f'/api/v1/tasks/{self.task.id}/view/')
        self.assertTrue(response.data['success'])
        response = self.client.get('/api/v1/tasks/count/pending/')
        self.assertEqual(response.data, {'count': 0})

    def test_admin_badge_counts_unviewed_completed(self):
        Task.objects.filter(pk=self.task.pk).update(status=Task.STATUS_COMPLETED)
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/tasks/count/pending/')
        self.assertEqual(response.data, {'count': 1})

        self.client.put(f'/api/v1/tasks/{self.task.id}/view/')
        response = self.client.get('/api/v1/tasks/count/pending/')
        self.assertEqual(response.data, {'count': 0})

    def test_view_mark_on_foreign_task_denied(self):
        self.client.authenticate_user(TestDataFactory.create_manager())
        response = self.client.put(f'/api/v1/tasks/{self.task.id}/view/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
