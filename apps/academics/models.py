# academics/models.py

from django.db import models
from django.db.models import Q, F
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
from utils.models import BaseModel
from unireg.managers import ActiveQuerySet, CourseOfferingManager
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# SEMESTER MODEL
# =============================================================================

class Semester(BaseModel):
    """
    An academic term. Semesters are ordered by ``(academic_year, term_order)``.
    """

    name = models.CharField(
        "Semester Name",
        max_length=100,
        unique=True,
        help_text="E.g., Fall 2025"
    )
    academic_year = models.CharField(
        "Academic Year",
        max_length=9,
        help_text="E.g., 2025/2026"
    )
    term_order = models.PositiveSmallIntegerField(
        "Term Order",
        validators=[MinValueValidator(1)],
        help_text="Position of the semester within its academic year"
    )

    start_date = models.DateField("Start Date", null=True, blank=True)
    end_date = models.DateField("End Date", null=True, blank=True)

    # At most one current semester; maintained by the catalog administrators
    is_current = models.BooleanField("Is Current", default=False)

    is_registration_open = models.BooleanField("Registration Open", default=False)
    registration_start_date = models.DateField("Registration Starts", null=True, blank=True)
    registration_end_date = models.DateField("Registration Ends", null=True, blank=True)

    class Meta:
        ordering = ['academic_year', 'term_order']
        verbose_name = "Semester"
        verbose_name_plural = "Semesters"
        constraints = [
            models.UniqueConstraint(
                fields=['academic_year', 'term_order'],
                name='unique_semester_term_order'
            ),
        ]
        indexes = [
            models.Index(fields=['academic_year', 'term_order']),
            models.Index(fields=['is_current']),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        super().clean()
        errors = {}

        if self.start_date and self.end_date and self.start_date > self.end_date:
            errors['end_date'] = 'End date must be after start date'

        if (self.registration_start_date and self.registration_end_date
                and self.registration_start_date > self.registration_end_date):
            errors['registration_end_date'] = 'Registration end date must be after its start date'

        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)

    def accepts_registration(self, on_date, enforce_window=True):
        """
        Whether enrollments may be taken on ``on_date``.

        Registration must be open; with ``enforce_window`` the optional
        registration start/end dates (inclusive) are honoured as well.
        """
        if not self.is_registration_open:
            return False
        if not enforce_window:
            return True
        if self.registration_start_date and on_date < self.registration_start_date:
            return False
        if self.registration_end_date and on_date > self.registration_end_date:
            return False
        return True


# =============================================================================
# COURSE MODEL
# =============================================================================

class Course(BaseModel):
    """Catalog entry for a course"""

    code = models.CharField("Course Code", max_length=20, unique=True, db_index=True)
    name = models.CharField("Course Name", max_length=200)
    credits = models.PositiveSmallIntegerField(
        "Credit Hours",
        validators=[MinValueValidator(1), MaxValueValidator(6)]
    )
    description = models.TextField("Description", blank=True)
    is_active = models.BooleanField("Is Active", default=True)

    prerequisites = models.ManyToManyField(
        'self',
        through='CoursePrerequisite',
        through_fields=('course', 'prerequisite'),
        symmetrical=False,
        related_name='required_for',
        blank=True
    )

    objects = ActiveQuerySet.as_manager()

    class Meta:
        ordering = ['code']
        verbose_name = "Course"
        verbose_name_plural = "Courses"
        constraints = [
            models.CheckConstraint(
                condition=Q(credits__gte=1) & Q(credits__lte=6),
                name='course_credits_range'
            ),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}"

    def clean(self):
        super().clean()
        if self.code:
            self.code = self.code.strip().upper()
        if self.credits is not None and not 1 <= self.credits <= 6:
            raise ValidationError({'credits': 'Credit hours must be between 1 and 6'})

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)


class CoursePrerequisite(BaseModel):
    """A course that must be completed before enrolling in another"""

    course = models.ForeignKey(
        Course,
        verbose_name="Course",
        on_delete=models.CASCADE,
        related_name='prerequisite_links'
    )
    prerequisite = models.ForeignKey(
        Course,
        verbose_name="Prerequisite",
        on_delete=models.CASCADE,
        related_name='dependent_links'
    )
    min_mark = models.DecimalField(
        "Minimum Mark",
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
        help_text="Lowest acceptable mark in the prerequisite (blank: any pass)"
    )
    is_required = models.BooleanField("Required", default=True)

    class Meta:
        verbose_name = "Course Prerequisite"
        verbose_name_plural = "Course Prerequisites"
        constraints = [
            models.UniqueConstraint(
                fields=['course', 'prerequisite'],
                name='unique_course_prerequisite'
            ),
            models.CheckConstraint(
                condition=~Q(course=F('prerequisite')),
                name='course_not_own_prerequisite'
            ),
        ]

    def __str__(self):
        return f"{self.prerequisite.code} before {self.course.code}"

    def clean(self):
        super().clean()
        if self.course_id and self.course_id == self.prerequisite_id:
            raise ValidationError({'prerequisite': 'A course cannot be its own prerequisite'})

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)


# =============================================================================
# COURSE OFFERING MODEL
# =============================================================================

class CourseOffering(BaseModel):
    """
    A course scheduled in a semester.

    ``enrolled_count`` is the seat counter: the number of in-progress,
    completed and failed enrollments. It is only changed by the conditional
    updates in ``EnrollmentLifecycleManager``; ``save()`` never writes it.
    """

    course = models.ForeignKey(
        Course,
        verbose_name="Course",
        on_delete=models.PROTECT,
        related_name='offerings'
    )
    semester = models.ForeignKey(
        Semester,
        verbose_name="Semester",
        on_delete=models.PROTECT,
        related_name='offerings'
    )

    max_students = models.PositiveIntegerField(
        "Maximum Students",
        default=30,
        validators=[MinValueValidator(1)]
    )
    min_gpa = models.DecimalField(
        "Minimum GPA",
        max_digits=3,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('4.00'))]
    )
    min_passed_hours = models.PositiveIntegerField("Minimum Passed Hours", default=0)

    enrolled_count = models.PositiveIntegerField(
        "Seats Taken",
        default=0,
        editable=False
    )

    is_active = models.BooleanField("Is Active", default=True)

    objects = CourseOfferingManager()

    # Fields frozen once the offering has enrollments
    IMMUTABLE_WITH_ENROLLMENTS = ('course_id', 'semester_id', 'min_gpa', 'min_passed_hours')

    class Meta:
        ordering = ['semester__academic_year', 'semester__term_order', 'course__code']
        verbose_name = "Course Offering"
        verbose_name_plural = "Course Offerings"
        constraints = [
            models.UniqueConstraint(
                fields=['course', 'semester'],
                name='unique_course_offering_per_semester'
            ),
            models.CheckConstraint(
                condition=Q(enrolled_count__gte=0),
                name='offering_enrolled_count_non_negative'
            ),
            models.CheckConstraint(
                condition=Q(enrolled_count__lte=F('max_students')),
                name='offering_enrolled_count_within_capacity'
            ),
        ]
        indexes = [
            models.Index(fields=['semester', 'is_active']),
        ]

    def __str__(self):
        return f"{self.course.code} ({self.semester})"

    # -------------------------------------------------------------------------
    # VALIDATION AND SAVE METHODS
    # -------------------------------------------------------------------------

    def clean(self):
        super().clean()
        errors = {}

        if self.max_students is not None and self.max_students < 1:
            errors['max_students'] = 'Capacity must be at least one seat'

        if not self._state.adding and self.pk:
            stored = type(self).objects.filter(pk=self.pk).values(
                'enrolled_count', *self.IMMUTABLE_WITH_ENROLLMENTS
            ).first()
            if stored is not None:
                if self.max_students is not None and self.max_students < stored['enrolled_count']:
                    errors['max_students'] = (
                        f"Capacity cannot drop below the {stored['enrolled_count']} seats already taken"
                    )
                if self.has_enrollments():
                    changed = [
                        name for name in self.IMMUTABLE_WITH_ENROLLMENTS
                        if getattr(self, name) != stored[name]
                    ]
                    if changed:
                        errors['__all__'] = (
                            'Offering has enrollments; only capacity and status may change '
                            f"(attempted: {', '.join(changed)})"
                        )

        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.clean()
        if self._state.adding:
            self.enrolled_count = 0
        elif kwargs.get('update_fields') is None:
            kwargs['update_fields'] = [
                f.name for f in self._meta.concrete_fields
                if not f.primary_key and f.name != 'enrolled_count'
            ]
        else:
            kwargs['update_fields'] = [
                name for name in kwargs['update_fields'] if name != 'enrolled_count'
            ]
        super().save(*args, **kwargs)

    # -------------------------------------------------------------------------
    # CAPACITY METHODS
    # -------------------------------------------------------------------------

    @property
    def credits(self):
        return self.course.credits

    def has_enrollments(self):
        return self.enrollments.exists()

    def has_capacity(self):
        """Check if the offering has a free seat (soft check)"""
        return self.enrolled_count < self.max_students

    def get_available_capacity(self):
        return max(0, self.max_students - self.enrolled_count)

    def get_occupancy_percentage(self):
        if self.max_students == 0:
            return 0
        return round((self.enrolled_count / self.max_students) * 100, 1)
