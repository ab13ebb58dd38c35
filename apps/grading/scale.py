# grading/scale.py

"""
Grade scale resolution.

Converts a numeric mark into a letter grade and quality points using the
active ``GradeScaleBand`` rows. The validated band list is cached in the
Django cache together with a fingerprint of the band table; a cached list
is reused only while the fingerprint still matches the database. The signal
handlers in ``grading.signals`` also drop the entry once a band change
commits.
"""

from bisect import bisect_right
from decimal import Decimal
from django.conf import settings
from django.core.cache import cache
from django.db.models import Count, Max, Q, Sum
from core.exceptions import ConfigurationError, InvalidMarkError, OutOfRangeError
from core.utils import safe_decimal, round_half_up
import logging

logger = logging.getLogger(__name__)

GRADE_SCALE_CACHE_KEY = 'grading:active_grade_scale'

MIN_MARK = Decimal('0')
MAX_MARK = Decimal('100')

# Marks are stored to two decimals, so adjacent bands may be this far apart
MARK_STEP = Decimal('0.01')


def clean_mark(value):
    """
    Parse and validate a raw mark.

    Returns:
        Decimal: The mark quantized to two places

    Raises:
        InvalidMarkError: value is not numeric
        OutOfRangeError: value is outside [0, 100]
    """
    mark = safe_decimal(value, default=None)
    if mark is None:
        raise InvalidMarkError(f"Mark {value!r} is not a number")
    if mark < MIN_MARK or mark > MAX_MARK:
        raise OutOfRangeError(f"Mark {mark} is outside the range 0-100")
    return round_half_up(mark)


class GradeScaleResolver:
    """Maps marks to grade scale bands"""

    # -------------------------------------------------------------------------
    # LOADING & VALIDATION
    # -------------------------------------------------------------------------

    @staticmethod
    def validate(bands):
        """
        Check that ``bands`` (sorted by min_mark) cover 0-100 exactly once.

        Raises:
            ConfigurationError: describing the first problem found
        """
        if not bands:
            raise ConfigurationError("No active grade scale bands are configured")

        for band in bands:
            if band.min_mark > band.max_mark:
                raise ConfigurationError(
                    f"Band {band.letter_grade} has min mark {band.min_mark} above max mark {band.max_mark}"
                )

        first, last = bands[0], bands[-1]
        if first.min_mark != MIN_MARK:
            raise ConfigurationError(
                f"Grade scale starts at {first.min_mark}; the lowest band must start at 0"
            )
        if last.max_mark != MAX_MARK:
            raise ConfigurationError(
                f"Grade scale ends at {last.max_mark}; the highest band must end at 100"
            )

        for prev, nxt in zip(bands, bands[1:]):
            if nxt.min_mark < prev.max_mark or nxt.min_mark == prev.min_mark:
                raise ConfigurationError(
                    f"Bands {prev.letter_grade} ({prev.min_mark}-{prev.max_mark}) and "
                    f"{nxt.letter_grade} ({nxt.min_mark}-{nxt.max_mark}) overlap"
                )
            if nxt.min_mark > prev.max_mark + MARK_STEP:
                raise ConfigurationError(
                    f"Gap in grade scale between {prev.max_mark} ({prev.letter_grade}) "
                    f"and {nxt.min_mark} ({nxt.letter_grade})"
                )

    @staticmethod
    def fingerprint():
        """
        Cheap summary of the band table, read in one aggregate query.

        Any committed insert, delete or edit of a band moves at least one of
        these values, so a cached scale whose fingerprint no longer matches
        is stale. Changes made inside a transaction that later rolls back
        leave the fingerprint where it was.
        """
        from .models import GradeScaleBand

        active = Q(is_active=True)
        summary = GradeScaleBand.objects.aggregate(
            total=Count('id'),
            active=Count('id', filter=active),
            latest=Max('updated_at'),
            points=Sum('quality_points', filter=active),
            lows=Sum('min_mark', filter=active),
            highs=Sum('max_mark', filter=active),
        )
        return tuple(
            str(summary[key])
            for key in ('total', 'active', 'latest', 'points', 'lows', 'highs')
        )

    @classmethod
    def load(cls):
        """
        Active bands sorted by min_mark, validated.

        The cached list is only reused while its fingerprint matches the
        database, so every process sees committed band changes, including
        ones written with ``QuerySet.update()``.

        Raises:
            ConfigurationError: the active scale is malformed
        """
        fingerprint = cls.fingerprint()

        cached = cache.get(GRADE_SCALE_CACHE_KEY)
        if cached is not None and cached[0] == fingerprint:
            logger.debug("Grade scale served from cache")
            return cached[1]

        from .models import GradeScaleBand

        bands = list(GradeScaleBand.objects.active().ordered())
        try:
            cls.validate(bands)
        except ConfigurationError as e:
            logger.error(f"Invalid grade scale configuration: {e}")
            raise

        cache.set(GRADE_SCALE_CACHE_KEY, (fingerprint, bands), settings.GRADE_SCALE_CACHE_TIMEOUT)
        logger.debug(f"Loaded {len(bands)} grade scale bands into cache")
        return bands

    @staticmethod
    def invalidate():
        cache.delete(GRADE_SCALE_CACHE_KEY)
        logger.debug("Grade scale cache cleared")

    # -------------------------------------------------------------------------
    # RESOLUTION
    # -------------------------------------------------------------------------

    @classmethod
    def resolve_band(cls, mark):
        """
        The band for ``mark``: the one with the highest min_mark not above it.
        A mark on a shared boundary therefore resolves to the higher band.
        """
        mark = clean_mark(mark)
        bands = cls.load()
        index = bisect_right([band.min_mark for band in bands], mark) - 1
        return bands[index]

    @classmethod
    def resolve(cls, mark):
        """
        Convert a mark to ``(letter_grade, quality_points)``.

        Example:
            >>> GradeScaleResolver.resolve(92)
            ('A', Decimal('4.00'))
        """
        band = cls.resolve_band(mark)
        return band.letter_grade, band.quality_points


def get_active_grade_scale():
    """Active bands in mark order, without validating the scale"""
    from .models import GradeScaleBand
    return list(GradeScaleBand.objects.active().ordered())
