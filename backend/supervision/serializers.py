"""
Student serializer.

The dashboard form posts camelCase keys (`studentName`, `profilePicture`,
...) while the model keeps Python names, so keys are renamed on the way in
and on the way out. Gallery uploads and removals ride along on the same
multipart request.
"""
from functools import partial

from django.db import transaction
from django.http import QueryDict
from rest_framework import serializers

from .files import delete_stored_files, image_validators
from .models import Student, StudentGalleryImage

API_NAMES = {
    "program_type": "programType",
    "supervision_role": "supervisionRole",
    "student_name": "studentName",
    "registration_number": "registrationNumber",
    "date_of_immatriculation": "dateOfImmatriculation",
    "expected_date_of_completion": "expectedDateOfCompletion",
    "university_name": "universityName",
    "university_address": "universityAddress",
    "father_name": "fatherName",
    "mother_name": "motherName",
    "whatsapp_number": "whatsappNumber",
    "emergency_contact_number": "emergencyContactNumber",
    "present_address": "presentAddress",
    "permanent_address": "permanentAddress",
    "date_of_birth": "dateOfBirth",
    "research_title": "researchTitle",
    "profile_picture": "profilePicture",
    "concept_note": "conceptNote",
    "research_proposal": "researchProposal",
    "thesis_report": "thesisReport",
    "gallery_images": "galleryImages",
    "remove_gallery_images": "removeGalleryImages",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}
MODEL_NAMES = {api: model for model, api in API_NAMES.items()}


def _rename(data, names: dict):
    if isinstance(data, QueryDict):
        renamed = QueryDict(mutable=True)
        for key in data:
            renamed.setlist(names.get(key, key), data.getlist(key))
        return renamed
    return {names.get(key, key): value for key, value in data.items()}


class StudentSerializer(serializers.ModelSerializer):
    gallery_images = serializers.ListField(
        child=serializers.FileField(validators=image_validators),
        write_only=True,
        required=False,
    )
    remove_gallery_images = serializers.JSONField(write_only=True, required=False)

    class Meta:
        model = Student
        fields = [
            "id",
            "program_type",
            "supervision_role",
            "student_name",
            "registration_number",
            "semester",
            "date_of_immatriculation",
            "expected_date_of_completion",
            "department",
            "faculty",
            "university_name",
            "university_address",
            "father_name",
            "mother_name",
            "whatsapp_number",
            "email",
            "emergency_contact_number",
            "present_address",
            "permanent_address",
            "date_of_birth",
            "research_title",
            "profile_picture",
            "concept_note",
            "research_proposal",
            "thesis_report",
            "gallery_images",
            "remove_gallery_images",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def to_internal_value(self, data):
        try:
            return super().to_internal_value(_rename(data, MODEL_NAMES))
        except serializers.ValidationError as exc:
            if isinstance(exc.detail, dict):
                raise serializers.ValidationError(_rename(exc.detail, API_NAMES))
            raise

    def to_representation(self, instance):
        data = super().to_representation(instance)
        request = self.context.get("request")
        data["gallery_images"] = [
            {
                "id": image.pk,
                "url": request.build_absolute_uri(image.image.url) if request else image.image.url,
            }
            for image in instance.gallery_images.all()
        ]
        return _rename(data, API_NAMES)

    def validate_remove_gallery_images(self, value):
        if value in (None, ""):
            return []
        if not isinstance(value, list):
            raise serializers.ValidationError("Expected a JSON list of image ids.")
        try:
            return [int(item) for item in value]
        except (TypeError, ValueError):
            raise serializers.ValidationError("Expected a JSON list of image ids.")

    @transaction.atomic
    def create(self, validated_data):
        images = validated_data.pop("gallery_images", [])
        validated_data.pop("remove_gallery_images", None)
        student = super().create(validated_data)
        for image in images:
            StudentGalleryImage.objects.create(student=student, image=image)
        return student

    @transaction.atomic
    def update(self, instance, validated_data):
        new_images = validated_data.pop("gallery_images", [])
        remove_ids = validated_data.pop("remove_gallery_images", [])

        # replaced (or cleared) files and removed gallery images leave the disk
        # only once the transaction commits
        stale = [
            (getattr(instance, name).storage, getattr(instance, name).name)
            for name in Student.FILE_FIELDS
            if name in validated_data and getattr(instance, name)
        ]

        instance = super().update(instance, validated_data)

        for image in instance.gallery_images.filter(pk__in=remove_ids):
            stale.append((image.image.storage, image.image.name))
            image.delete()
        for image in new_images:
            StudentGalleryImage.objects.create(student=instance, image=image)

        transaction.on_commit(partial(delete_stored_files, stale))
        return instance
