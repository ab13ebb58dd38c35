# apps/students/migrations/0001_initial.py

from decimal import Decimal
from django.db import migrations, models
import django.core.validators
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was last updated', verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('created_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was created', null=True, verbose_name='Created From IP')),
                ('updated_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was last updated', null=True, verbose_name='Updated From IP')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('student_number', models.CharField(db_index=True, max_length=20, unique=True, verbose_name='Student Number')),
                ('full_name', models.CharField(max_length=150, verbose_name='Full Name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='Email')),
                ('department_code', models.CharField(blank=True, max_length=20, verbose_name='Department Code')),
                ('department_name', models.CharField(blank=True, max_length=100, verbose_name='Department Name')),
                ('cumulative_gpa', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=3, validators=[django.core.validators.MinValueValidator(Decimal('0.00')), django.core.validators.MaxValueValidator(Decimal('4.00'))], verbose_name='Cumulative GPA')),
                ('percentage', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Credit-weighted mean mark of graded courses', max_digits=5, validators=[django.core.validators.MinValueValidator(Decimal('0.00')), django.core.validators.MaxValueValidator(Decimal('100.00'))], verbose_name='Percentage')),
                ('passed_hours', models.PositiveIntegerField(default=0, help_text='Credit hours of completed (passed) courses', verbose_name='Passed Hours')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
            ],
            options={
                'verbose_name': 'Student',
                'verbose_name_plural': 'Students',
                'ordering': ['student_number'],
                'indexes': [
                    models.Index(fields=['department_code'], name='students_st_departm_5f74a6_idx'),
                    models.Index(fields=['is_active'], name='students_st_is_acti_c00e81_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('cumulative_gpa__gte', 0), ('cumulative_gpa__lte', 4)), name='student_cumulative_gpa_range'),
                ],
            },
        ),
    ]
