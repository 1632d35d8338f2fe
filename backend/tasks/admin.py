from django.contrib import admin
from .models import Task, TaskComment


class TaskCommentInline(admin.TabularInline):
    model = TaskComment
    extra = 0
    fields = ['text', 'added_by', 'parent', 'timestamp']


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['number', 'status', 'assigned_to', 'project', 'created_by', 'created_at']
    list_filter = ['status']
    search_fields = ['number', 'description', 'assigned_to__email']
    inlines = [TaskCommentInline]
