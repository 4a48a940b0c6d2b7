"""
Where student uploads are stored and which ones are accepted.

Files end up in `MEDIA_ROOT/students/<kind>/` named
`<email>_<field>_<original name>_<timestamp><ext>` so they can be traced
back to a student even outside the database.
"""
from __future__ import annotations

import os
import re
import time

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import FileExtensionValidator
from django.utils.deconstruct import deconstructible

IMAGE_EXTENSIONS = ["jpeg", "jpg", "png", "gif", "webp", "avif", "bmp", "svg"]
DOCUMENT_EXTENSIONS = ["pdf", "doc", "docx", "ppt", "pptx", "xls", "xlsx", "txt", "zip", "rar"]

_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


def safe_name(value: str) -> str:
    return _UNSAFE.sub("_", value)


@deconstructible
class StudentUploadPath:
    """`upload_to` callable; works for the student itself and its gallery images."""

    def __init__(self, kind: str, field_label: str):
        self.kind = kind
        self.field_label = field_label

    def __call__(self, instance, filename: str) -> str:
        student = getattr(instance, "student", instance)
        email = safe_name(student.email or "unknown")
        base, ext = os.path.splitext(os.path.basename(filename))
        timestamp = int(time.time() * 1000)
        return f"students/{self.kind}/{email}_{self.field_label}_{safe_name(base)}_{timestamp}{ext.lower()}"

    def __eq__(self, other):
        return (
            isinstance(other, StudentUploadPath)
            and self.kind == other.kind
            and self.field_label == other.field_label
        )


def delete_stored_files(files) -> None:
    """Remove `(storage, name)` pairs from disk; names already gone are skipped."""
    for storage, name in files:
        if name and storage.exists(name):
            storage.delete(name)


def validate_upload_size(upload) -> None:
    limit = settings.UPLOAD_MAX_FILE_SIZE
    if upload.size > limit:
        raise ValidationError(
            f"File is too large ({upload.size} bytes); the limit is {limit // (1024 * 1024)} MB."
        )


image_validators = [FileExtensionValidator(IMAGE_EXTENSIONS), validate_upload_size]
document_validators = [FileExtensionValidator(IMAGE_EXTENSIONS + DOCUMENT_EXTENSIONS), validate_upload_size]
