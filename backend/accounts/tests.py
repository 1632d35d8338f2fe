"""
Test suite for project accounts
"""
from datetime import date
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import AccountEntry


class AccountEntryAPITests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.project = TestDataFactory.create_project()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_create_entry(self):
        data = {'project_id': self.project.id, 'date': '2024-03-05', 'amount': '1500.50', 'type': 'expense',
                'mode': 'Bank', 'category': 'Maintenance'}
        response = self.client.post('/api/v1/accounts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['type'], 'expense')
        self.assertEqual(response.data['project'], {'id': self.project.id, 'name': self.project.name})
        self.assertEqual(response.data['added_by']['id'], self.admin.id)

        entry = AccountEntry.objects.get(pk=response.data['id'])
        self.assertEqual(entry.amount, Decimal('1500.50'))
        self.assertEqual(entry.entry_type, AccountEntry.TYPE_EXPENSE)

    def test_create_validation(self):
        data = {'project_id': self.project.id, 'date': '2024-03-05', 'amount': '-1', 'type': 'gift',
                'category': 'Misc'}
        response = self.client.post('/api/v1/accounts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data)
        self.assertIn('type', response.data)
        self.assertIn('mode', response.data)

    def test_zero_amount_allowed(self):
        data = {'project_id': self.project.id, 'date': '2024-03-05', 'amount': '0', 'type': 'income',
                'mode': 'Cash', 'category': 'Adjustment'}
        response = self.client.post('/api/v1/accounts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_unknown_project(self):
        data = {'project_id': 99999, 'date': '2024-03-05', 'amount': '10', 'type': 'income',
                'mode': 'Cash', 'category': 'Rent'}
        response = self.client.post('/api/v1/accounts/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Project not found')

    def test_list_filters(self):
        other = TestDataFactory.create_project()
        march = TestDataFactory.create_account_entry(self.project, date=date(2024, 3, 10))
        april = TestDataFactory.create_account_entry(
            self.project, entry_type=AccountEntry.TYPE_EXPENSE, date=date(2024, 4, 2)
        )
        TestDataFactory.create_account_entry(other, date=date(2024, 3, 15))

        response = self.client.get('/api/v1/accounts/', {'project_id': self.project.id})
        self.assertEqual([e['id'] for e in response.data], [april.id, march.id])

        response = self.client.get('/api/v1/accounts/', {'project_id': self.project.id, 'type': 'expense'})
        self.assertEqual([e['id'] for e in response.data], [april.id])

        response = self.client.get('/api/v1/accounts/', {'project_id': self.project.id, 'type': 'bogus'})
        self.assertEqual(len(response.data), 2)

        response = self.client.get('/api/v1/accounts/', {'start_date': '2024-03-01', 'end_date': '2024-03-31'})
        self.assertEqual(len(response.data), 2)

    def test_update_and_delete(self):
        entry = TestDataFactory.create_account_entry(self.project)
        response = self.client.patch(f'/api/v1/accounts/{entry.id}/', {'amount': '250', 'mode': 'Bank'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entry.refresh_from_db()
        self.assertEqual(entry.amount, Decimal('250'))
        self.assertEqual(entry.mode, 'Bank')

        response = self.client.delete(f'/api/v1/accounts/{entry.id}/')
        self.assertEqual(response.data, {'message': 'Account entry deleted successfully'})
        self.assertFalse(AccountEntry.objects.exists())

    def test_manager_denied(self):
        self.client.authenticate_user(TestDataFactory.create_manager(projects=[self.project]))
        response = self.client.get('/api/v1/accounts/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Admin access required')


class AccountReportTests(TestCase):

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.project = TestDataFactory.create_project()
        factory = TestDataFactory.create_account_entry
        factory(self.project, AccountEntry.TYPE_INCOME, Decimal('5000'), mode='Cash', category='Rent')
        factory(self.project, AccountEntry.TYPE_EXPENSE, Decimal('1200'), mode='Cash', category='Repairs')
        factory(self.project, AccountEntry.TYPE_PAYOUT, Decimal('800'), mode='Bank', category='Salary')
        factory(self.project, AccountEntry.TYPE_INCOMING_LOAN, Decimal('3000'), mode='Bank', category='Loan')
        factory(self.project, AccountEntry.TYPE_OUTGOING_LOAN, Decimal('1000'), mode='Cash', category='Loan')
        factory(TestDataFactory.create_project(), AccountEntry.TYPE_INCOME, Decimal('700'), mode='JazzCash',
                category='Booking')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_summary_for_project(self):
        response = self.client.get('/api/v1/accounts/summary/', {'project_id': self.project.id})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {
            'total_income': 5000.0,
            'total_expenses': 1200.0,
            'total_payouts': 800.0,
            'total_incoming_loans': 3000.0,
            'total_outgoing_loans': 1000.0,
            'total_loans': -2000.0,
            'total_profit': 3800.0,
        })

    def test_summary_empty_window(self):
        response = self.client.get('/api/v1/accounts/summary/', {'start_date': '2000-01-01', 'end_date': '2000-01-31'})
        self.assertEqual(response.data['total_income'], 0.0)
        self.assertEqual(response.data['total_profit'], 0.0)

    def test_categories_and_modes(self):
        response = self.client.get('/api/v1/accounts/categories/', {'project_id': self.project.id})
        self.assertEqual(response.data, ['Loan', 'Rent', 'Repairs', 'Salary'])

        response = self.client.get('/api/v1/accounts/modes/')
        self.assertEqual(response.data, ['Bank', 'Cash', 'JazzCash'])

    def test_balance_per_mode(self):
        response = self.client.get('/api/v1/accounts/balance/')
        self.assertEqual(response.data, [
            {'mode': 'Bank', 'balance': 2200.0},
            {'mode': 'Cash', 'balance': 2800.0},
            {'mode': 'JazzCash', 'balance': 700.0},
        ])
