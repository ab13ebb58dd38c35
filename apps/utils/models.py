# utils/models.py

"""
Abstract base model shared by every engine table.

Timestamps and the acting user/IP are stamped in ``save()`` from the
thread-local request context populated by ``AuditContextMiddleware`` (or by
``RequestContext`` in management commands).
"""

from django.db import models
from django.utils import timezone
import uuid
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# BASE MODEL
# =============================================================================

class BaseModel(models.Model):
    """
    Base model with audit trail fields.

    - UUID primary key
    - created_at / updated_at set on save
    - created_by_id / updated_by_id and source IPs from the request context
    - optional change_reason recorded with the write
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    created_at = models.DateTimeField(
        "Created At",
        default=timezone.now,
        db_index=True,
        help_text="When this record was created"
    )
    updated_at = models.DateTimeField(
        "Updated At",
        default=timezone.now,
        db_index=True,
        help_text="When this record was last updated"
    )

    # CharField so audit ids never depend on the auth tables
    created_by_id = models.CharField(
        "Created By ID",
        max_length=50,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID of user who created this record"
    )
    updated_by_id = models.CharField(
        "Updated By ID",
        max_length=50,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID of user who last updated this record"
    )

    created_from_ip = models.GenericIPAddressField(
        "Created From IP",
        null=True,
        blank=True,
        help_text="IP address from which this record was created"
    )
    updated_from_ip = models.GenericIPAddressField(
        "Updated From IP",
        null=True,
        blank=True,
        help_text="IP address from which this record was last updated"
    )

    change_reason = models.CharField(
        "Change Reason",
        max_length=255,
        blank=True,
        null=True,
        help_text="Explanation for why this change was made"
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        """
        Stamp timestamps and audit fields, then save.

        When ``update_fields`` is given the audit columns are appended to it so
        partial saves still record who touched the row.
        """
        from utils.context import get_request_context

        is_new = self._state.adding
        now = timezone.now()

        if not is_new:
            self.updated_at = now

        touched = ['updated_at']
        context = get_request_context()

        if context:
            user = context.get('user')
            ip_address = context.get('ip_address')

            if is_new:
                if user is not None and not self.created_by_id:
                    self.created_by_id = str(user.pk)
                if ip_address and not self.created_from_ip:
                    self.created_from_ip = ip_address

            if user is not None:
                self.updated_by_id = str(user.pk)
                touched.append('updated_by_id')
            if ip_address:
                self.updated_from_ip = ip_address
                touched.append('updated_from_ip')
        elif is_new:
            logger.debug(
                f"Creating {self._meta.label} without request context "
                f"(management command or shell)"
            )

        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = list(dict.fromkeys([*update_fields, *touched]))

        super().save(*args, **kwargs)


def audit_update_fields():
    """
    Audit columns for a queryset ``.update()``, which bypasses ``save()``.

    Example:
        Enrollment.objects.filter(pk=pk).update(status='WITHDRAWN', **audit_update_fields())
    """
    from utils.context import get_request_context

    fields = {'updated_at': timezone.now()}
    context = get_request_context()
    if context:
        user = context.get('user')
        if user is not None:
            fields['updated_by_id'] = str(user.pk)
        if context.get('ip_address'):
            fields['updated_from_ip'] = context['ip_address']
    return fields
