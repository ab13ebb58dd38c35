# students/models.py

from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
from utils.models import BaseModel
from unireg.managers import ActiveQuerySet

import logging

logger = logging.getLogger(__name__)


# =============================================================================
# STUDENT MODEL
# =============================================================================

class Student(BaseModel):
    """
    A registered student.

    ``cumulative_gpa``, ``percentage`` and ``passed_hours`` are a projection
    of the student's graded enrollments, rewritten by
    ``GPACalculator.refresh_student_projection`` after every grade event.
    """

    # -------------------------------------------------------------------------
    # IDENTIFICATION & BASIC INFORMATION
    # -------------------------------------------------------------------------

    student_number = models.CharField(
        "Student Number",
        max_length=20,
        unique=True,
        db_index=True
    )
    full_name = models.CharField("Full Name", max_length=150)
    email = models.EmailField("Email", blank=True)

    # Enrollment department reference (the catalog itself is external)
    department_code = models.CharField("Department Code", max_length=20, blank=True)
    department_name = models.CharField("Department Name", max_length=100, blank=True)

    # -------------------------------------------------------------------------
    # ACADEMIC PROJECTION
    # -------------------------------------------------------------------------

    cumulative_gpa = models.DecimalField(
        "Cumulative GPA",
        max_digits=3,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('4.00'))]
    )
    percentage = models.DecimalField(
        "Percentage",
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('100.00'))],
        help_text="Credit-weighted mean mark of graded courses"
    )
    passed_hours = models.PositiveIntegerField(
        "Passed Hours",
        default=0,
        help_text="Credit hours of completed (passed) courses"
    )

    is_active = models.BooleanField("Active", default=True)

    objects = ActiveQuerySet.as_manager()

    class Meta:
        ordering = ['student_number']
        verbose_name = "Student"
        verbose_name_plural = "Students"
        indexes = [
            models.Index(fields=['department_code']),
            models.Index(fields=['is_active']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(cumulative_gpa__gte=0) & models.Q(cumulative_gpa__lte=4),
                name='student_cumulative_gpa_range'
            ),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.student_number})"

    def clean(self):
        super().clean()
        if self.student_number:
            self.student_number = self.student_number.strip().upper()
        if not self.student_number:
            raise ValidationError({'student_number': 'Student number is required'})

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)
