"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.accounts.models import AccountEntry
from backend.campaigns.models import Campaign, CampaignLead
from backend.inventory.models import InventoryItem
from backend.leads.models import Lead
from backend.projects.models import Project
from backend.tasks.models import Task
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_lowercase + string.digits, k=length))

    @staticmethod
    def create_user(email=None, password='testpass123', role=User.ROLE_MANAGER, name=None, projects=None):
        """Create a test user, optionally assigned to projects"""
        if not email:
            email = f'user_{TestDataFactory.random_string(6)}@test.com'
        user = User.objects.create_user(
            email=email,
            password=password,
            name=name or f'User {TestDataFactory.random_string(4)}',
            role=role,
        )
        if projects:
            user.projects.add(*projects)
        return user

    @staticmethod
    def create_admin(email=None, password='testpass123', name='Admin'):
        """Create a test admin"""
        return TestDataFactory.create_user(email=email, password=password, role=User.ROLE_ADMIN, name=name)

    @staticmethod
    def create_manager(email=None, password='testpass123', name=None, projects=None):
        """Create a test manager"""
        return TestDataFactory.create_user(
            email=email, password=password, role=User.ROLE_MANAGER, name=name, projects=projects
        )

    @staticmethod
    def create_project(name=None, location='Gulberg, Lahore', created_by=None, managers=None):
        """Create a test project"""
        if not name:
            name = f'Project_{TestDataFactory.random_string(6)}'
        project = Project.objects.create(name=name, location=location, created_by=created_by)
        if managers:
            project.managers.add(*managers)
        return project

    @staticmethod
    def create_lead(project, name=None, contact_no=None, status=Lead.STATUS_FRESH, created_by=None):
        """Create a test lead with its initial status history row"""
        if not name:
            name = f'Lead_{TestDataFactory.random_string(6)}'
        if not contact_no:
            contact_no = f'03{random.randint(100000000, 999999999)}'
        lead = Lead.objects.create(project=project, name=name, contact_no=contact_no, status=status)
        lead.record_status(status, created_by)
        return lead

    @staticmethod
    def create_inventory_item(location=None, property_type='Shop', rent=None, is_rented=False):
        """Create a test inventory item"""
        return InventoryItem.objects.create(
            location=location or f'Plaza {TestDataFactory.random_string(4)}',
            property_type=property_type,
            rent=rent,
            is_rented=is_rented,
        )

    @staticmethod
    def create_task(assigned_to, created_by=None, number=None, status=Task.STATUS_OPEN, project=None):
        """Create a test task"""
        if not number:
            number = f'T-{TestDataFactory.random_string(6).upper()}'
        return Task.objects.create(
            number=number,
            description='Follow up',
            assigned_to=assigned_to,
            created_by=created_by,
            status=status,
            project=project,
        )

    @staticmethod
    def create_account_entry(project, entry_type=AccountEntry.TYPE_INCOME, amount=None, mode='Cash',
                             category='Rent', date=None, added_by=None):
        """Create a test account entry"""
        return AccountEntry.objects.create(
            project=project,
            entry_type=entry_type,
            amount=amount if amount is not None else Decimal('1000.00'),
            mode=mode,
            category=category,
            date=date or timezone.localdate(),
            added_by=added_by,
        )

    @staticmethod
    def create_campaign(assigned_to, name=None, lead_statuses=(CampaignLead.STATUS_PENDING,)):
        """Create a test campaign with one lead per given status"""
        campaign = Campaign.objects.create(
            name=name or f'Campaign_{TestDataFactory.random_string(6)}',
            assigned_to=assigned_to,
        )
        for index, lead_status in enumerate(lead_statuses):
            CampaignLead.objects.create(campaign=campaign, name=f'Business {index + 1}', status=lead_status)
        return campaign


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
