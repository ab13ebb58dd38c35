# core/utils.py

"""
Central utilities shared by the engine apps: time, decimal arithmetic and
the singleton configuration lookup.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import logging

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal('0.01')


# =============================================================================
# TIME
# =============================================================================

def get_current_time():
    """
    Current time in the configured TIME_ZONE.

    Example:
        >>> from core.utils import get_current_time
        >>> enrollment.completion_date = get_current_time()
    """
    from django.utils import timezone
    return timezone.localtime(timezone.now())


def get_today():
    """
    Today's date in the configured TIME_ZONE.

    Always use this instead of date.today() for registration window checks
    and enrollment/withdrawal dates.
    """
    return get_current_time().date()


# =============================================================================
# NUMBER & CALCULATION UTILITIES
# =============================================================================

def safe_decimal(value, default=Decimal('0.00')):
    """
    Safely convert value to Decimal.

    Args:
        value: Value to convert
        default: Default value if conversion fails

    Returns:
        Decimal: Converted value or default

    Example:
        >>> from core.utils import safe_decimal
        >>> mark = safe_decimal(cell.value, default=None)
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        result = Decimal(str(value).strip())
    except (ValueError, TypeError, InvalidOperation):
        return default
    if not result.is_finite():
        return default
    return result


def round_half_up(value, places=TWO_PLACES):
    """Round a Decimal half away from zero (2.345 -> 2.35)"""
    return Decimal(value).quantize(places, rounding=ROUND_HALF_UP)


def calculate_percentage(part, whole):
    """
    Calculate percentage with safe division.

    Returns:
        Decimal: Percentage value to two places, 0 if whole is 0

    Example:
        >>> calculate_percentage(30, 120)  # Decimal('25.00')
    """
    part = safe_decimal(part)
    whole = safe_decimal(whole)

    if whole == 0:
        return Decimal('0.00')

    return round_half_up(part / whole * 100)


# =============================================================================
# CONFIGURATION
# =============================================================================

def get_academic_configuration():
    """Singleton AcademicConfiguration (created with defaults on first use)"""
    from core.models import AcademicConfiguration
    return AcademicConfiguration.get_instance()


# =============================================================================
# LOOKUPS
# =============================================================================

def get_or_not_found(queryset, pk, label):
    """
    Fetch a row by primary key, raising ``NotFoundError`` when it is missing.

    Malformed identifiers (e.g. an invalid UUID string) are reported as not
    found rather than as validation errors.

    Args:
        queryset: Model class or QuerySet to read from
        pk: Primary key value supplied by the caller
        label: Human-readable name used in the error message
    """
    from django.core.exceptions import ObjectDoesNotExist, ValidationError
    from core.exceptions import NotFoundError

    if hasattr(queryset, '_default_manager'):
        queryset = queryset._default_manager.all()

    try:
        return queryset.get(pk=pk)
    except (ObjectDoesNotExist, ValidationError, ValueError, TypeError):
        raise NotFoundError(f"{label} {pk} not found") from None
