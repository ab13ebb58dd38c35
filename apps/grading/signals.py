# grading/signals.py

"""
Grading signals: drop the cached grade scale once a band change commits.
"""

from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from .models import GradeScaleBand
from .scale import GradeScaleResolver

logger = logging.getLogger(__name__)


@receiver(post_save, sender=GradeScaleBand)
@receiver(post_delete, sender=GradeScaleBand)
def invalidate_grade_scale_cache(sender, instance, **kwargs):
    # Rolled-back changes never reach on_commit
    transaction.on_commit(GradeScaleResolver.invalidate)
    logger.debug(f"Grade scale band {instance} changed; cache invalidation queued")
