# apps/core/migrations/0001_initial.py

from decimal import Decimal
from django.db import migrations, models
import django.core.validators
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AcademicConfiguration',
            fields=[
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was last updated', verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('created_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was created', null=True, verbose_name='Created From IP')),
                ('updated_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was last updated', null=True, verbose_name='Updated From IP')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('id', models.PositiveSmallIntegerField(default=1, editable=False, primary_key=True, serialize=False)),
                ('passing_quality_points', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='A graded enrollment passes when its quality points are strictly above this value', max_digits=3, validators=[django.core.validators.MinValueValidator(Decimal('0.00')), django.core.validators.MaxValueValidator(Decimal('4.00'))], verbose_name='Passing Quality Points')),
                ('honors_gpa', models.DecimalField(decimal_places=2, default=Decimal('3.50'), help_text='Cumulative GPA at or above which a student is on Honors', max_digits=3, validators=[django.core.validators.MinValueValidator(Decimal('0.00')), django.core.validators.MaxValueValidator(Decimal('4.00'))], verbose_name='Honors GPA')),
                ('good_standing_gpa', models.DecimalField(decimal_places=2, default=Decimal('2.00'), help_text='Cumulative GPA below which a student is on Academic Probation', max_digits=3, validators=[django.core.validators.MinValueValidator(Decimal('0.00')), django.core.validators.MaxValueValidator(Decimal('4.00'))], verbose_name='Good Standing GPA')),
                ('enforce_registration_window', models.BooleanField(default=True, help_text="Reject enrollments outside a semester's registration start/end dates", verbose_name='Enforce Registration Window')),
            ],
            options={
                'verbose_name': 'Academic Configuration',
                'verbose_name_plural': 'Academic Configuration',
            },
        ),
    ]
