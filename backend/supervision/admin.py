from django.contrib import admin

from .models import Student, StudentGalleryImage


class StudentGalleryImageInline(admin.TabularInline):
    model = StudentGalleryImage
    extra = 0


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("student_name", "registration_number", "program_type", "supervision_role", "created_at")
    list_filter = ("program_type", "supervision_role")
    search_fields = ("student_name", "registration_number", "email")
    inlines = [StudentGalleryImageInline]
