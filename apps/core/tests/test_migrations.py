from django.db import connection
from django.db.migrations.loader import MigrationLoader
from django.test import TestCase


MODEL_APPS = ('core', 'students', 'academics', 'grading', 'enrollment')


class InitialMigrationTests(TestCase):

    def _constraints(self, table):
        with connection.cursor() as cursor:
            return connection.introspection.get_constraints(cursor, table)

    def test_every_model_app_has_an_initial_migration(self):
        loader = MigrationLoader(connection, ignore_no_migrations=True)

        for app in MODEL_APPS:
            with self.subTest(app=app):
                self.assertIn((app, '0001_initial'), loader.disk_migrations)
                self.assertNotIn(app, loader.unmigrated_apps)

    def test_enrollment_constraints_are_migrated(self):
        constraints = self._constraints('enrollment_enrollment')

        self.assertIn('unique_active_enrollment_per_offering', constraints)
        self.assertTrue(constraints['unique_active_enrollment_per_offering']['unique'])
        self.assertIn('enrollment_mark_range', constraints)

    def test_seat_counter_constraints_are_migrated(self):
        constraints = self._constraints('academics_courseoffering')

        self.assertIn('offering_enrolled_count_within_capacity', constraints)
        self.assertIn('offering_enrolled_count_non_negative', constraints)
