from decimal import Decimal

from django.core.cache import cache
from django.db import transaction
from django.test import SimpleTestCase, TestCase, TransactionTestCase

from core.exceptions import ConfigurationError, InvalidMarkError, OutOfRangeError
from core.tests.factories import make_grade_scale
from grading.models import GradeScaleBand
from grading.scale import GRADE_SCALE_CACHE_KEY, GradeScaleResolver, clean_mark


def band(letter, low, high, points='0.00'):
    return GradeScaleBand(
        letter_grade=letter,
        min_mark=Decimal(low),
        max_mark=Decimal(high),
        quality_points=Decimal(points),
    )


class GradeScaleValidationTests(SimpleTestCase):

    def test_shared_boundaries_are_valid(self):
        GradeScaleResolver.validate([
            band('F', '0', '50'),
            band('C', '50', '75'),
            band('A', '75', '100'),
        ])

    def test_two_decimal_step_between_bands_is_valid(self):
        GradeScaleResolver.validate([
            band('F', '0', '59.99'),
            band('P', '60', '100'),
        ])

    def test_no_bands(self):
        with self.assertRaises(ConfigurationError):
            GradeScaleResolver.validate([])

    def test_must_start_at_zero(self):
        with self.assertRaisesMessage(ConfigurationError, 'must start at 0'):
            GradeScaleResolver.validate([band('F', '1', '50'), band('A', '50', '100')])

    def test_must_end_at_one_hundred(self):
        with self.assertRaisesMessage(ConfigurationError, 'must end at 100'):
            GradeScaleResolver.validate([band('F', '0', '50'), band('A', '50', '99')])

    def test_gap(self):
        with self.assertRaisesMessage(ConfigurationError, 'Gap'):
            GradeScaleResolver.validate([
                band('F', '0', '59.98'),
                band('P', '60', '100'),
            ])

    def test_overlap(self):
        with self.assertRaisesMessage(ConfigurationError, 'overlap'):
            GradeScaleResolver.validate([
                band('F', '0', '60'),
                band('P', '55', '100'),
            ])

    def test_min_above_max(self):
        with self.assertRaises(ConfigurationError):
            GradeScaleResolver.validate([
                band('F', '0', '50'),
                band('X', '70', '60'),
                band('A', '60', '100'),
            ])


class CleanMarkTests(SimpleTestCase):

    def test_quantizes_to_two_places(self):
        self.assertEqual(clean_mark('72.345'), Decimal('72.35'))
        self.assertEqual(clean_mark(80), Decimal('80.00'))

    def test_out_of_range_is_an_invalid_mark(self):
        for value in (-1, '100.01', 250):
            with self.subTest(value=value):
                with self.assertRaises(OutOfRangeError):
                    clean_mark(value)
        self.assertTrue(issubclass(OutOfRangeError, InvalidMarkError))

    def test_non_numeric(self):
        for value in ('abc', None, '', 'NaN', True):
            with self.subTest(value=value):
                with self.assertRaises(InvalidMarkError):
                    clean_mark(value)


class GradeScaleResolverTests(TestCase):

    def setUp(self):
        cache.clear()
        self.bands = make_grade_scale()

    def test_resolve(self):
        self.assertEqual(GradeScaleResolver.resolve(92), ('A', Decimal('4.00')))
        self.assertEqual(GradeScaleResolver.resolve('85.5'), ('B', Decimal('3.00')))
        self.assertEqual(GradeScaleResolver.resolve(0), ('F', Decimal('0.00')))
        self.assertEqual(GradeScaleResolver.resolve(100), ('A', Decimal('4.00')))

    def test_shared_boundary_resolves_to_higher_band(self):
        self.assertEqual(GradeScaleResolver.resolve(90)[0], 'A')
        self.assertEqual(GradeScaleResolver.resolve('89.99')[0], 'B')
        self.assertEqual(GradeScaleResolver.resolve(60)[0], 'D')

    def test_every_mark_resolves_to_a_containing_band(self):
        mark = Decimal('0')
        while mark <= 100:
            resolved = GradeScaleResolver.resolve_band(mark)
            containing = [b for b in self.bands if b.contains(mark)]
            self.assertIn(resolved.letter_grade, [b.letter_grade for b in containing])
            mark += Decimal('0.25')

    def test_out_of_range(self):
        with self.assertRaises(OutOfRangeError):
            GradeScaleResolver.resolve(101)

    def test_inactive_bands_are_ignored(self):
        GradeScaleBand.objects.create(
            letter_grade='Z', min_mark=Decimal('0'), max_mark=Decimal('100'),
            quality_points=Decimal('1.00'), is_active=False,
        )
        self.assertEqual(GradeScaleResolver.resolve(10)[0], 'F')

    def test_band_change_invalidates_cache(self):
        self.assertEqual(GradeScaleResolver.resolve(10)[0], 'F')

        failing = GradeScaleBand.objects.get(letter_grade='F')
        failing.letter_grade = 'E'
        failing.save()

        self.assertEqual(GradeScaleResolver.resolve(10)[0], 'E')

    def test_band_delete_invalidates_cache(self):
        GradeScaleResolver.load()
        GradeScaleBand.objects.get(letter_grade='C').delete()

        with self.assertRaises(ConfigurationError):
            GradeScaleResolver.resolve(75)

    def test_malformed_scale_is_logged_and_raised(self):
        GradeScaleResolver.load()
        GradeScaleBand.objects.filter(letter_grade='A').update(max_mark=Decimal('99'))

        with self.assertLogs('grading.scale', level='ERROR'):
            with self.assertRaises(ConfigurationError):
                GradeScaleResolver.resolve(50)

    def test_unchanged_scale_is_served_from_cache(self):
        GradeScaleResolver.load()

        # Only the fingerprint aggregate runs
        with self.assertNumQueries(1):
            GradeScaleResolver.resolve(70)

    def test_bulk_update_is_picked_up(self):
        self.assertEqual(GradeScaleResolver.resolve(95), ('A', Decimal('4.00')))

        GradeScaleBand.objects.filter(letter_grade='A').update(quality_points=Decimal('3.90'))

        self.assertEqual(GradeScaleResolver.resolve(95), ('A', Decimal('3.90')))

    def test_band_change_clears_cache_on_commit(self):
        GradeScaleResolver.load()
        failing = GradeScaleBand.objects.get(letter_grade='F')
        failing.description = 'Fail'

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            failing.save()
            self.assertIsNotNone(cache.get(GRADE_SCALE_CACHE_KEY))

        self.assertEqual(len(callbacks), 1)
        self.assertIsNone(cache.get(GRADE_SCALE_CACHE_KEY))


class GradeScaleRollbackTests(TransactionTestCase):

    def setUp(self):
        cache.clear()
        make_grade_scale()

    def test_rolled_back_band_change_is_not_served(self):
        self.assertEqual(GradeScaleResolver.resolve(10)[0], 'F')

        with self.assertRaises(RuntimeError):
            with transaction.atomic():
                failing = GradeScaleBand.objects.get(letter_grade='F')
                failing.letter_grade = 'X'
                failing.save()
                self.assertEqual(GradeScaleResolver.resolve(10)[0], 'X')
                raise RuntimeError('abort')

        self.assertEqual(GradeScaleBand.objects.filter(letter_grade='F').count(), 1)
        self.assertEqual(GradeScaleResolver.resolve(10)[0], 'F')

    def test_committed_band_change_is_served(self):
        GradeScaleResolver.load()

        with transaction.atomic():
            failing = GradeScaleBand.objects.get(letter_grade='F')
            failing.letter_grade = 'E'
            failing.save()

        self.assertIsNone(cache.get(GRADE_SCALE_CACHE_KEY))
        self.assertEqual(GradeScaleResolver.resolve(10)[0], 'E')
