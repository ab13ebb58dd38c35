# enrollment/models.py

from django.db import models
from django.db.models import Q
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
from utils.models import BaseModel
from unireg.managers import EnrollmentManager
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# ENROLLMENT MODEL
# =============================================================================

class Enrollment(BaseModel):
    """
    A student's seat in a course offering and its grade.

    Lifecycle: IN_PROGRESS -> COMPLETED | FAILED | WITHDRAWN. The three
    outcomes are terminal. Rows are never deleted; a withdrawn enrollment is
    kept (inactive) for the transcript and audit trail.
    """

    class Status(models.TextChoices):
        IN_PROGRESS = 'IN_PROGRESS', 'In Progress'
        COMPLETED = 'COMPLETED', 'Completed'
        WITHDRAWN = 'WITHDRAWN', 'Withdrawn'
        FAILED = 'FAILED', 'Failed'

    # Statuses that count toward GPA
    GRADED_STATUSES = (Status.COMPLETED, Status.FAILED)
    TRANSCRIPT_STATUSES = (Status.COMPLETED, Status.FAILED, Status.WITHDRAWN)
    # Statuses counted by CourseOffering.enrolled_count
    SEAT_HOLDING_STATUSES = (Status.IN_PROGRESS, Status.COMPLETED, Status.FAILED)
    TERMINAL_STATUSES = (Status.COMPLETED, Status.FAILED, Status.WITHDRAWN)

    student = models.ForeignKey(
        'students.Student',
        verbose_name="Student",
        on_delete=models.PROTECT,
        related_name='enrollments'
    )
    offering = models.ForeignKey(
        'academics.CourseOffering',
        verbose_name="Course Offering",
        on_delete=models.PROTECT,
        related_name='enrollments'
    )
    enrollment_date = models.DateField("Enrollment Date")

    # Grade
    mark = models.DecimalField(
        "Mark",
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    letter_grade = models.CharField("Letter Grade", max_length=3, blank=True)
    quality_points = models.DecimalField(
        "Quality Points",
        max_digits=3,
        decimal_places=2,
        null=True,
        blank=True
    )

    status = models.CharField(
        "Status",
        max_length=20,
        choices=Status.choices,
        default=Status.IN_PROGRESS,
        db_index=True
    )
    is_active = models.BooleanField("Is Active", default=True)

    completion_date = models.DateField("Completion Date", null=True, blank=True)
    withdrawal_date = models.DateField("Withdrawal Date", null=True, blank=True)
    withdrawal_reason = models.TextField("Withdrawal Reason", blank=True)
    remarks = models.TextField("Remarks", blank=True)

    objects = EnrollmentManager()

    class Meta:
        ordering = ['-enrollment_date']
        verbose_name = "Enrollment"
        verbose_name_plural = "Enrollments"
        constraints = [
            models.UniqueConstraint(
                fields=['student', 'offering'],
                condition=Q(is_active=True),
                name='unique_active_enrollment_per_offering'
            ),
            models.CheckConstraint(
                condition=Q(mark__isnull=True) | (Q(mark__gte=0) & Q(mark__lte=100)),
                name='enrollment_mark_range'
            ),
        ]
        indexes = [
            models.Index(fields=['student', 'status']),
            models.Index(fields=['offering', 'status']),
        ]

    def __str__(self):
        return f"{self.student} - {self.offering} ({self.get_status_display()})"

    # -------------------------------------------------------------------------
    # VALIDATION AND SAVE METHODS
    # -------------------------------------------------------------------------

    def clean(self):
        super().clean()
        errors = {}

        if self.status == self.Status.WITHDRAWN and self.is_active:
            errors['is_active'] = 'A withdrawn enrollment cannot be active'

        if self.status in self.GRADED_STATUSES and self.mark is None:
            errors['mark'] = 'Graded enrollments must have a mark'

        if self.withdrawal_date and self.enrollment_date and self.withdrawal_date < self.enrollment_date:
            errors['withdrawal_date'] = 'Withdrawal date cannot be before the enrollment date'

        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        # Uniqueness of the active enrollment is left to the database
        # constraint; the lifecycle manager maps its IntegrityError.
        self.clean()
        super().save(*args, **kwargs)

    # -------------------------------------------------------------------------
    # STATUS HELPERS
    # -------------------------------------------------------------------------

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    @property
    def counts_toward_gpa(self):
        return self.status in self.GRADED_STATUSES and self.quality_points is not None


# =============================================================================
# ENROLLMENT STATUS HISTORY
# =============================================================================

class EnrollmentStatusHistory(BaseModel):
    """Track enrollment status changes"""

    enrollment = models.ForeignKey(
        Enrollment,
        verbose_name="Enrollment",
        on_delete=models.PROTECT,
        related_name='status_history'
    )
    previous_status = models.CharField(
        "Previous Status",
        max_length=20,
        choices=Enrollment.Status.choices,
        blank=True
    )
    new_status = models.CharField(
        "New Status",
        max_length=20,
        choices=Enrollment.Status.choices
    )
    effective_date = models.DateField("Effective Date")
    reason = models.TextField("Reason for Change", blank=True)
    mark = models.DecimalField(
        "Mark",
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True
    )

    class Meta:
        verbose_name = "Enrollment Status History"
        verbose_name_plural = "Enrollment Status Histories"
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['enrollment', 'effective_date']),
            models.Index(fields=['new_status', 'effective_date']),
        ]

    def __str__(self):
        previous = self.previous_status or 'NEW'
        return f"{self.enrollment_id}: {previous} -> {self.new_status}"
