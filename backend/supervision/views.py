from __future__ import annotations

import logging
from functools import partial

from django.db import transaction
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.views import APIView

from core.responses import success

from .files import delete_stored_files
from .models import Student
from .serializers import StudentSerializer

logger = logging.getLogger(__name__)


def get_student(pk) -> Student:
    try:
        return Student.objects.prefetch_related("gallery_images").get(pk=pk)
    except Student.DoesNotExist:
        raise NotFound("Student not found")


class StudentListView(APIView):
    """
    GET  /api/students/  -> every student, newest first
    POST /api/students/  -> multipart form with the student fields and files
    """

    def get(self, request, *args, **kwargs):
        students = Student.objects.prefetch_related("gallery_images")
        return success(StudentSerializer(students, many=True, context={"request": request}).data)

    def post(self, request, *args, **kwargs):
        serializer = StudentSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        student = serializer.save()
        logger.info("Created student %s (%s)", student.pk, student.registration_number)
        return success(
            serializer.data,
            message="Student created successfully",
            status_code=status.HTTP_201_CREATED,
        )


class StudentDetailView(APIView):
    def get(self, request, pk, *args, **kwargs):
        student = get_student(pk)
        return success(StudentSerializer(student, context={"request": request}).data)

    def put(self, request, pk, *args, **kwargs):
        """Partial update: only the fields (and files) that were sent change."""
        student = get_student(pk)
        serializer = StudentSerializer(student, data=request.data, partial=True, context={"request": request})
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Updated student %s", pk)
        return success(
            StudentSerializer(get_student(pk), context={"request": request}).data,
            message="Student updated successfully",
        )

    patch = put

    def delete(self, request, pk, *args, **kwargs):
        student = get_student(pk)
        with transaction.atomic():
            files = student.stored_files()
            student.delete()
            transaction.on_commit(partial(delete_stored_files, files))
        logger.info("Deleted student %s and its files", pk)
        return success(message="Student deleted successfully")
