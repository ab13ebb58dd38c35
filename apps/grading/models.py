# grading/models.py

from django.db import models
from django.db.models import Q, F
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
from utils.models import BaseModel
from unireg.managers import GradeScaleBandManager
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# GRADE SCALE BAND MODEL
# =============================================================================

class GradeScaleBand(BaseModel):
    """
    One row of the grading scale: the inclusive mark range
    ``[min_mark, max_mark]`` that earns ``letter_grade`` and
    ``quality_points``.

    The active bands together must cover 0-100 without gaps or overlaps;
    ``GradeScaleResolver.validate`` enforces this whenever the scale is
    loaded. Neighbouring bands may share a boundary mark.
    """

    min_mark = models.DecimalField(
        "Minimum Mark",
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    max_mark = models.DecimalField(
        "Maximum Mark",
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    letter_grade = models.CharField("Letter Grade", max_length=3)
    quality_points = models.DecimalField(
        "Quality Points",
        max_digits=3,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('4'))]
    )
    description = models.CharField("Description", max_length=100, blank=True)
    is_active = models.BooleanField("Is Active", default=True)

    objects = GradeScaleBandManager()

    class Meta:
        ordering = ['min_mark', 'max_mark']
        verbose_name = "Grade Scale Band"
        verbose_name_plural = "Grade Scale Bands"
        constraints = [
            models.CheckConstraint(
                condition=Q(min_mark__lte=F('max_mark')),
                name='grade_band_min_not_above_max'
            ),
            models.CheckConstraint(
                condition=Q(min_mark__gte=0) & Q(max_mark__lte=100),
                name='grade_band_within_mark_range'
            ),
        ]
        indexes = [
            models.Index(fields=['is_active', 'min_mark']),
        ]

    def __str__(self):
        return f"{self.letter_grade} ({self.min_mark}-{self.max_mark})"

    def clean(self):
        super().clean()
        if self.letter_grade:
            self.letter_grade = self.letter_grade.strip().upper()
        if (self.min_mark is not None and self.max_mark is not None
                and self.min_mark > self.max_mark):
            raise ValidationError({'max_mark': 'Maximum mark must not be below the minimum mark'})

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)

    def contains(self, mark):
        return self.min_mark <= mark <= self.max_mark
