"""
Contact Form Signals

Django signals for contact-related events.
"""
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver
from .models import ContactSubmission

logger = logging.getLogger(__name__)


@receiver(post_save, sender=ContactSubmission)
def contact_submission_post_save(sender, instance, created, **kwargs):
    """Audit trail for stored submissions."""
    if created:
        logger.info(
            f"Stored contact submission {instance.reference} from {instance.email} "
            f"(ip={instance.ip_address or 'unknown'})"
        )
