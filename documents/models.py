from django.conf import settings
from django.db import models
from django.utils import timezone

from accounts.models import Division


class Inspector(models.Model):
    name = models.CharField(max_length=150, unique=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Document(models.Model):
    class Status(models.TextChoices):
        OPEN = 'Open', 'Open'
        RETURNED = 'Returned', 'Returned'
        ON_HOLD = 'On Hold', 'On Hold'
        CLOSED = 'Closed', 'Closed'
        DELETED = 'Deleted', 'Deleted'

    # Format: AWD-<YEAR>-<NNNN>. Editable at intake.
    reference_number = models.CharField(max_length=30, unique=True)
    reference_year = models.PositiveIntegerField(null=True, blank=True, editable=False)
    reference_sequence = models.PositiveIntegerField(null=True, blank=True, editable=False)

    subject = models.CharField(max_length=255)
    originating_office = models.CharField(max_length=150)
    date_of_document = models.DateField(null=True, blank=True)
    fsis_reference_number = models.CharField(max_length=100, blank=True)
    awd_received_date = models.DateField(null=True, blank=True)

    forwarded_by = models.CharField(max_length=200, blank=True)
    forwarded_to = models.CharField(max_length=20, choices=Division.choices, blank=True)
    forwarded_to_name = models.CharField(max_length=150, blank=True)
    remarks = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OPEN, db_index=True)

    working_days = models.PositiveSmallIntegerField(default=3)
    start_date = models.DateTimeField(default=timezone.now)
    deadline = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)

    assigned_inspector = models.CharField(max_length=150, blank=True)
    received_by = models.CharField(max_length=150, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='created_documents'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-reference_sequence', '-reference_number']
        indexes = [
            models.Index(fields=['status', 'forwarded_to'], name='documents_d_status_5b1f0e_idx'),
            models.Index(fields=['reference_year', 'reference_sequence'], name='documents_d_referen_8c2a41_idx'),
        ]

    def __str__(self):
        return f"{self.reference_number} - {self.subject}"

    def save(self, *args, **kwargs):
        from .utils import parse_reference_number
        from routing.deadlines import compute_deadline

        parsed = parse_reference_number(self.reference_number)
        self.reference_year, self.reference_sequence = parsed if parsed else (None, None)

        if self.deadline is None and self.start_date and self.working_days:
            self.deadline = compute_deadline(self.start_date, self.working_days)

        super().save(*args, **kwargs)

    @property
    def is_closed(self):
        return self.status == self.Status.CLOSED

    @property
    def deadline_status(self):
        from routing.deadlines import deadline_status
        return deadline_status(self.start_date, self.working_days, end_date=self.end_date)

    @property
    def allowed_actions(self):
        from routing.transitions import allowed_actions
        return allowed_actions(self.status, self.forwarded_to)

    @property
    def audit_trail(self):
        return self.tracking_entries.order_by('action_timestamp', 'id')


class TrackingEntry(models.Model):
    """
    Append-only snapshot of a document taken every time it changes hands.
    """
    document = models.ForeignKey(Document, on_delete=models.CASCADE, related_name='tracking_entries')
    reference_number = models.CharField(max_length=30, db_index=True)
    action = models.CharField(max_length=30)

    subject = models.CharField(max_length=255)
    originating_office = models.CharField(max_length=150, blank=True)
    forwarded_by = models.CharField(max_length=200, blank=True)
    forwarded_to = models.CharField(max_length=20, blank=True)
    forwarded_to_name = models.CharField(max_length=150, blank=True)
    status = models.CharField(max_length=20)
    remarks = models.TextField(blank=True)
    working_days = models.PositiveSmallIntegerField(null=True, blank=True)
    assigned_inspector = models.CharField(max_length=150, blank=True)

    action_timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ['action_timestamp', 'id']
        verbose_name_plural = "Tracking Entries"

    def __str__(self):
        return f"{self.reference_number} - {self.action} -> {self.forwarded_to}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValueError("Tracking entries are immutable.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        # Purging a document removes its entries through querysets instead.
        raise ValueError("Tracking entries cannot be deleted.")

    @classmethod
    def snapshot(cls, document, action, remarks=None):
        return cls(
            document=document,
            reference_number=document.reference_number,
            action=action,
            subject=document.subject,
            originating_office=document.originating_office,
            forwarded_by=document.forwarded_by,
            forwarded_to=document.forwarded_to,
            forwarded_to_name=document.forwarded_to_name,
            status=document.status,
            remarks=document.remarks if remarks is None else remarks,
            working_days=document.working_days,
            assigned_inspector=document.assigned_inspector,
        )


class MandayRecord(models.Model):
    """
    Planned vs actual working days for a closed document.
    """
    document = models.ForeignKey(Document, on_delete=models.CASCADE, related_name='manday_records')
    reference_number = models.CharField(max_length=30, db_index=True)
    original_working_days = models.PositiveSmallIntegerField()
    actual_working_days = models.PositiveSmallIntegerField()
    inspector_name = models.CharField(max_length=150)
    division = models.CharField(max_length=20, blank=True)
    start_date = models.DateField()
    end_date = models.DateField()
    date_recorded = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-date_recorded']

    def __str__(self):
        return f"{self.reference_number}: {self.actual_working_days}/{self.original_working_days}"


class ReturnRecord(models.Model):
    class Kind(models.TextChoices):
        RETURN_TO_INSPECTOR = 'INSPECTOR', 'Returned to Inspector'
        RETURN_TO_AWD = 'AWD', 'Returned to AWD'

    kind = models.CharField(max_length=20, choices=Kind.choices)
    document = models.ForeignKey(Document, on_delete=models.CASCADE, related_name='return_records')
    reference_number = models.CharField(max_length=30, db_index=True)
    subject = models.CharField(max_length=255)
    forwarded_by = models.CharField(max_length=200, blank=True)
    forwarded_to = models.CharField(max_length=20, blank=True)
    remarks = models.TextField(blank=True)
    recorded_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"{self.reference_number} ({self.get_kind_display()})"
