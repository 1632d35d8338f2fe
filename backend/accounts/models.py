from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class AccountEntry(models.Model):
    """A money movement booked against a project"""
    TYPE_INCOME = 'income'
    TYPE_EXPENSE = 'expense'
    TYPE_INCOMING_LOAN = 'incomingLoan'
    TYPE_OUTGOING_LOAN = 'outgoingLoan'
    TYPE_PAYOUT = 'payout'
    TYPE_CHOICES = [
        (TYPE_INCOME, 'Income'),
        (TYPE_EXPENSE, 'Expense'),
        (TYPE_INCOMING_LOAN, 'Incoming Loan'),
        (TYPE_OUTGOING_LOAN, 'Outgoing Loan'),
        (TYPE_PAYOUT, 'Payout'),
    ]
    # Money in vs money out of a mode's balance
    CREDIT_TYPES = (TYPE_INCOME, TYPE_INCOMING_LOAN)
    DEBIT_TYPES = (TYPE_EXPENSE, TYPE_OUTGOING_LOAN, TYPE_PAYOUT)

    project = models.ForeignKey('projects.Project', on_delete=models.CASCADE, related_name='account_entries')
    date = models.DateField()
    amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(0)])
    entry_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    mode = models.CharField(max_length=100, default='Cash')
    category = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    added_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='account_entries'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'account_entries'
        ordering = ['-date', '-created_at', '-id']
        verbose_name_plural = 'account entries'
        indexes = [
            models.Index(fields=['project', 'date'], name='idx_account_project_date'),
            models.Index(fields=['entry_type'], name='idx_account_type'),
        ]

    def __str__(self):
        return f"{self.entry_type} {self.amount} ({self.mode})"
