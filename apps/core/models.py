# core/models.py

"""
Institution-wide academic policy.
"""

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from django.core.exceptions import ValidationError
from decimal import Decimal
from utils.models import BaseModel
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# ACADEMIC CONFIGURATION MODEL
# =============================================================================

class AcademicConfiguration(BaseModel):
    """
    Singleton holding the grading and registration policy.
    Only one instance exists (pk=1); use ``get_instance()``.
    """

    id = models.PositiveSmallIntegerField(primary_key=True, default=1, editable=False)

    # -------------------------------------------------------------------------
    # GRADING POLICY
    # -------------------------------------------------------------------------

    passing_quality_points = models.DecimalField(
        "Passing Quality Points",
        max_digits=3,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('4.00'))],
        help_text="A graded enrollment passes when its quality points are strictly above this value"
    )

    # -------------------------------------------------------------------------
    # ACADEMIC STANDING
    # -------------------------------------------------------------------------

    honors_gpa = models.DecimalField(
        "Honors GPA",
        max_digits=3,
        decimal_places=2,
        default=Decimal('3.50'),
        validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('4.00'))],
        help_text="Cumulative GPA at or above which a student is on Honors"
    )
    good_standing_gpa = models.DecimalField(
        "Good Standing GPA",
        max_digits=3,
        decimal_places=2,
        default=Decimal('2.00'),
        validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('4.00'))],
        help_text="Cumulative GPA below which a student is on Academic Probation"
    )

    # -------------------------------------------------------------------------
    # REGISTRATION
    # -------------------------------------------------------------------------

    enforce_registration_window = models.BooleanField(
        "Enforce Registration Window",
        default=True,
        help_text="Reject enrollments outside a semester's registration start/end dates"
    )

    class Meta:
        verbose_name = "Academic Configuration"
        verbose_name_plural = "Academic Configuration"

    def __str__(self):
        return "Academic Configuration"

    def clean(self):
        super().clean()
        if self.good_standing_gpa > self.honors_gpa:
            raise ValidationError({
                'good_standing_gpa': 'Good standing GPA cannot be above the honors GPA'
            })

    @classmethod
    def get_instance(cls):
        """Get or create the singleton instance."""
        instance, created = cls.objects.get_or_create(pk=1)
        if created:
            logger.info("Created default AcademicConfiguration")
        return instance

    def save(self, *args, **kwargs):
        """Ensure only one instance exists (singleton pattern)"""
        self.pk = 1
        self.full_clean()
        super().save(*args, **kwargs)
        logger.debug("AcademicConfiguration saved")

    def delete(self, *args, **kwargs):
        """Prevent deletion of the singleton instance"""
        logger.warning("Attempted to delete AcademicConfiguration singleton - operation blocked")

    def get_academic_standing(self, gpa):
        """Honors / Good Standing / Academic Probation for a cumulative GPA"""
        if gpa >= self.honors_gpa:
            return 'Honors'
        if gpa >= self.good_standing_gpa:
            return 'Good Standing'
        return 'Academic Probation'
