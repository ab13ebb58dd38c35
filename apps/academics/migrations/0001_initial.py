# apps/academics/migrations/0001_initial.py

from decimal import Decimal
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Semester',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was last updated', verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('created_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was created', null=True, verbose_name='Created From IP')),
                ('updated_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was last updated', null=True, verbose_name='Updated From IP')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('name', models.CharField(help_text='E.g., Fall 2025', max_length=100, unique=True, verbose_name='Semester Name')),
                ('academic_year', models.CharField(help_text='E.g., 2025/2026', max_length=9, verbose_name='Academic Year')),
                ('term_order', models.PositiveSmallIntegerField(help_text='Position of the semester within its academic year', validators=[django.core.validators.MinValueValidator(1)], verbose_name='Term Order')),
                ('start_date', models.DateField(blank=True, null=True, verbose_name='Start Date')),
                ('end_date', models.DateField(blank=True, null=True, verbose_name='End Date')),
                ('is_current', models.BooleanField(default=False, verbose_name='Is Current')),
                ('is_registration_open', models.BooleanField(default=False, verbose_name='Registration Open')),
                ('registration_start_date', models.DateField(blank=True, null=True, verbose_name='Registration Starts')),
                ('registration_end_date', models.DateField(blank=True, null=True, verbose_name='Registration Ends')),
            ],
            options={
                'verbose_name': 'Semester',
                'verbose_name_plural': 'Semesters',
                'ordering': ['academic_year', 'term_order'],
                'indexes': [
                    models.Index(fields=['academic_year', 'term_order'], name='academics_s_academi_3be8df_idx'),
                    models.Index(fields=['is_current'], name='academics_s_is_curr_c34375_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('academic_year', 'term_order'), name='unique_semester_term_order'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Course',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was last updated', verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('created_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was created', null=True, verbose_name='Created From IP')),
                ('updated_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was last updated', null=True, verbose_name='Updated From IP')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('code', models.CharField(db_index=True, max_length=20, unique=True, verbose_name='Course Code')),
                ('name', models.CharField(max_length=200, verbose_name='Course Name')),
                ('credits', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(6)], verbose_name='Credit Hours')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('is_active', models.BooleanField(default=True, verbose_name='Is Active')),
            ],
            options={
                'verbose_name': 'Course',
                'verbose_name_plural': 'Courses',
                'ordering': ['code'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('credits__gte', 1), ('credits__lte', 6)), name='course_credits_range'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CoursePrerequisite',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was last updated', verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('created_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was created', null=True, verbose_name='Created From IP')),
                ('updated_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was last updated', null=True, verbose_name='Updated From IP')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('min_mark', models.DecimalField(blank=True, decimal_places=2, help_text='Lowest acceptable mark in the prerequisite (blank: any pass)', max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('100'))], verbose_name='Minimum Mark')),
                ('is_required', models.BooleanField(default=True, verbose_name='Required')),
                ('course', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='prerequisite_links', to='academics.course', verbose_name='Course')),
                ('prerequisite', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='dependent_links', to='academics.course', verbose_name='Prerequisite')),
            ],
            options={
                'verbose_name': 'Course Prerequisite',
                'verbose_name_plural': 'Course Prerequisites',
                'constraints': [
                    models.UniqueConstraint(fields=('course', 'prerequisite'), name='unique_course_prerequisite'),
                    models.CheckConstraint(condition=models.Q(('course', models.F('prerequisite')), _negated=True), name='course_not_own_prerequisite'),
                ],
            },
        ),
        migrations.AddField(
            model_name='course',
            name='prerequisites',
            field=models.ManyToManyField(blank=True, related_name='required_for', through='academics.CoursePrerequisite', through_fields=('course', 'prerequisite'), to='academics.course'),
        ),
        migrations.CreateModel(
            name='CourseOffering',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was last updated', verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('created_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was created', null=True, verbose_name='Created From IP')),
                ('updated_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was last updated', null=True, verbose_name='Updated From IP')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('max_students', models.PositiveIntegerField(default=30, validators=[django.core.validators.MinValueValidator(1)], verbose_name='Maximum Students')),
                ('min_gpa', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=3, validators=[django.core.validators.MinValueValidator(Decimal('0.00')), django.core.validators.MaxValueValidator(Decimal('4.00'))], verbose_name='Minimum GPA')),
                ('min_passed_hours', models.PositiveIntegerField(default=0, verbose_name='Minimum Passed Hours')),
                ('enrolled_count', models.PositiveIntegerField(default=0, editable=False, verbose_name='Seats Taken')),
                ('is_active', models.BooleanField(default=True, verbose_name='Is Active')),
                ('course', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='offerings', to='academics.course', verbose_name='Course')),
                ('semester', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='offerings', to='academics.semester', verbose_name='Semester')),
            ],
            options={
                'verbose_name': 'Course Offering',
                'verbose_name_plural': 'Course Offerings',
                'ordering': ['semester__academic_year', 'semester__term_order', 'course__code'],
                'indexes': [
                    models.Index(fields=['semester', 'is_active'], name='academics_c_semeste_fe1796_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('course', 'semester'), name='unique_course_offering_per_semester'),
                    models.CheckConstraint(condition=models.Q(('enrolled_count__gte', 0)), name='offering_enrolled_count_non_negative'),
                    models.CheckConstraint(condition=models.Q(('enrolled_count__lte', models.F('max_students'))), name='offering_enrolled_count_within_capacity'),
                ],
            },
        ),
    ]
