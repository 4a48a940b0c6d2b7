from django.core.validators import MinValueValidator
from django.db import models


class CallDetailRecord(models.Model):
    """
    One call from the IVR/PBX export.

    `name` and `address` are filled in by the operators afterwards: the
    caller's location and the problem they called about.
    """

    ANSWERED = "ANSWERED"
    NO_ANSWER = "NO ANSWER"
    BUSY = "BUSY"
    FAILED = "FAILED"

    date = models.DateTimeField(db_index=True)
    source = models.CharField(max_length=50)
    destination = models.CharField(max_length=50, blank=True, default="")
    src_channel = models.CharField(max_length=100, blank=True, default="")
    dst_channel = models.CharField(max_length=100, blank=True, default="")
    # PBX dispositions are mostly the four constants above, but anything is kept
    status = models.CharField(max_length=32, blank=True, default="", db_index=True)
    duration = models.PositiveIntegerField(default=0, validators=[MinValueValidator(0)])
    name = models.CharField(max_length=255, blank=True, default="")
    address = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "cdr"
        ordering = ["-date", "-id"]
        verbose_name = "call detail record"

    def __str__(self) -> str:
        return f"{self.source} -> {self.destination} ({self.status or 'unknown'}) at {self.date:%Y-%m-%d %H:%M}"


class CISRequest(models.Model):
    """A request for climate data sent in through the CIS form."""

    class Status(models.TextChoices):
        PENDING = "Pending", "Pending"
        APPROVED = "Approved", "Approved"
        REJECTED = "Rejected", "Rejected"

    name = models.CharField(max_length=255)
    designation = models.CharField(max_length=255, blank=True, default="")
    organization = models.CharField(max_length=255, blank=True, default="")
    address = models.TextField(blank=True, default="")
    mobile = models.CharField(max_length=30)
    email = models.EmailField(blank=True, default="")
    selected_stations = models.JSONField(default=list)
    selected_weather_parameters = models.JSONField(default=list)
    selected_data_formats = models.JSONField(default=list, blank=True)
    time_interval = models.CharField(max_length=20, blank=True, default="")
    data_interval = models.CharField(max_length=20, blank=True, default="")
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    remarks = models.TextField(blank=True, default="")
    submit_time = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "cis_requests"
        ordering = ["-submit_time", "-id"]
        verbose_name = "CIS request"

    def __str__(self) -> str:
        return f"{self.name} ({self.organization or 'individual'}) - {self.status}"
