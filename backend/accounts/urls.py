from django.urls import path
from .views import (
    account_list_create, account_detail, account_summary,
    account_categories, account_modes, account_balance,
)

urlpatterns = [
    path('accounts/', account_list_create, name='account-list-create'),
    path('accounts/summary/', account_summary, name='account-summary'),
    path('accounts/categories/', account_categories, name='account-categories'),
    path('accounts/modes/', account_modes, name='account-modes'),
    path('accounts/balance/', account_balance, name='account-balance'),
    path('accounts/<int:pk>/', account_detail, name='account-detail'),
]
