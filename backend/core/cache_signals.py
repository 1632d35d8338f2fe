"""
Cache invalidation signals
Automatically invalidate derived caches when lead data changes
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .cache_utils import invalidate_dashboard_cache

logger = logging.getLogger('backend.core')

# Thread-local storage to track signal suspension
_thread_locals = threading.local()

# Models whose changes feed the dashboard counts
DASHBOARD_SOURCE_MODELS = ('Lead', 'LeadRemark', 'LeadStatusChange')


@contextmanager
def suspend_cache_signals():
    """
    Temporarily suspend cache invalidation signals.
    Bulk operations use this and invalidate once afterwards.
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


@receiver([post_save, post_delete])
def invalidate_dashboard_on_lead_change(sender, instance, **kwargs):
    """Invalidate dashboard metrics when leads, remarks or status history change"""
    if is_suspended():
        return

    if sender.__name__ not in DASHBOARD_SOURCE_MODELS:
        return

    try:
        from backend.leads.models import Lead, LeadRemark, LeadStatusChange
        if isinstance(instance, (Lead, LeadRemark, LeadStatusChange)):
            # Invalidate once the change is committed
            transaction.on_commit(invalidate_dashboard_cache)
    except Exception as e:
        logger.warning(f"Error in invalidate_dashboard_on_lead_change signal: {e}")
