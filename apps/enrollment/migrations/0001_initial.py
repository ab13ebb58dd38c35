# apps/enrollment/migrations/0001_initial.py

from decimal import Decimal
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('academics', '0001_initial'),
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Enrollment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was last updated', verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('created_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was created', null=True, verbose_name='Created From IP')),
                ('updated_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was last updated', null=True, verbose_name='Updated From IP')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('enrollment_date', models.DateField(verbose_name='Enrollment Date')),
                ('mark', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('100'))], verbose_name='Mark')),
                ('letter_grade', models.CharField(blank=True, max_length=3, verbose_name='Letter Grade')),
                ('quality_points', models.DecimalField(blank=True, decimal_places=2, max_digits=3, null=True, verbose_name='Quality Points')),
                ('status', models.CharField(choices=[('IN_PROGRESS', 'In Progress'), ('COMPLETED', 'Completed'), ('WITHDRAWN', 'Withdrawn'), ('FAILED', 'Failed')], db_index=True, default='IN_PROGRESS', max_length=20, verbose_name='Status')),
                ('is_active', models.BooleanField(default=True, verbose_name='Is Active')),
                ('completion_date', models.DateField(blank=True, null=True, verbose_name='Completion Date')),
                ('withdrawal_date', models.DateField(blank=True, null=True, verbose_name='Withdrawal Date')),
                ('withdrawal_reason', models.TextField(blank=True, verbose_name='Withdrawal Reason')),
                ('remarks', models.TextField(blank=True, verbose_name='Remarks')),
                ('offering', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='enrollments', to='academics.courseoffering', verbose_name='Course Offering')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='enrollments', to='students.student', verbose_name='Student')),
            ],
            options={
                'verbose_name': 'Enrollment',
                'verbose_name_plural': 'Enrollments',
                'ordering': ['-enrollment_date'],
                'indexes': [
                    models.Index(fields=['student', 'status'], name='enrollment__student_431ee3_idx'),
                    models.Index(fields=['offering', 'status'], name='enrollment__offerin_fe8dd9_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('student', 'offering'), name='unique_active_enrollment_per_offering'),
                    models.CheckConstraint(condition=models.Q(('mark__isnull', True), models.Q(('mark__gte', 0), ('mark__lte', 100)), _connector='OR'), name='enrollment_mark_range'),
                ],
            },
        ),
        migrations.CreateModel(
            name='EnrollmentStatusHistory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was created', verbose_name='Created At')),
                ('updated_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When this record was last updated', verbose_name='Updated At')),
                ('created_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who created this record', max_length=50, null=True, verbose_name='Created By ID')),
                ('updated_by_id', models.CharField(blank=True, db_index=True, help_text='ID of user who last updated this record', max_length=50, null=True, verbose_name='Updated By ID')),
                ('created_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was created', null=True, verbose_name='Created From IP')),
                ('updated_from_ip', models.GenericIPAddressField(blank=True, help_text='IP address from which this record was last updated', null=True, verbose_name='Updated From IP')),
                ('change_reason', models.CharField(blank=True, help_text='Explanation for why this change was made', max_length=255, null=True, verbose_name='Change Reason')),
                ('previous_status', models.CharField(blank=True, choices=[('IN_PROGRESS', 'In Progress'), ('COMPLETED', 'Completed'), ('WITHDRAWN', 'Withdrawn'), ('FAILED', 'Failed')], max_length=20, verbose_name='Previous Status')),
                ('new_status', models.CharField(choices=[('IN_PROGRESS', 'In Progress'), ('COMPLETED', 'Completed'), ('WITHDRAWN', 'Withdrawn'), ('FAILED', 'Failed')], max_length=20, verbose_name='New Status')),
                ('effective_date', models.DateField(verbose_name='Effective Date')),
                ('reason', models.TextField(blank=True, verbose_name='Reason for Change')),
                ('mark', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True, verbose_name='Mark')),
                ('enrollment', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='status_history', to='enrollment.enrollment', verbose_name='Enrollment')),
            ],
            options={
                'verbose_name': 'Enrollment Status History',
                'verbose_name_plural': 'Enrollment Status Histories',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['enrollment', 'effective_date'], name='enrollment__enrollm_bc0b8e_idx'),
                    models.Index(fields=['new_status', 'effective_date'], name='enrollment__new_sta_aa4cd6_idx'),
                ],
            },
        ),
    ]
