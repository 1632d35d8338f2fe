from django.urls import path
from .views import (
    task_list_create, task_detail, task_update_status, task_add_comment, task_reassign,
    task_pending_count, task_mark_viewed, task_mark_comments_viewed,
)

urlpatterns = [
    path('tasks/', task_list_create, name='task-list-create'),
    path('tasks/count/pending/', task_pending_count, name='task-pending-count'),
    path('tasks/<int:pk>/', task_detail, name='task-detail'),
    path('tasks/<int:pk>/status/', task_update_status, name='task-update-status'),
    path('tasks/<int:pk>/comments/', task_add_comment, name='task-add-comment'),
    path('tasks/<int:pk>/reassign/', task_reassign, name='task-reassign'),
    path('tasks/<int:pk>/view/', task_mark_viewed, name='task-mark-viewed'),
    path('tasks/<int:pk>/view-comments/', task_mark_comments_viewed, name='task-mark-comments-viewed'),
]
