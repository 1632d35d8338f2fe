from django.contrib import admin
from .models import AccountEntry


@admin.register(AccountEntry)
class AccountEntryAdmin(admin.ModelAdmin):
    list_display = ['date', 'project', 'entry_type', 'amount', 'mode', 'category', 'added_by']
    list_filter = ['entry_type', 'mode', 'project']
    search_fields = ['category', 'description']
    date_hierarchy = 'date'
