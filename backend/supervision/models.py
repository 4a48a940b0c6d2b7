from django.db import models

from .files import StudentUploadPath, document_validators, image_validators


class Student(models.Model):
    """A supervised student: who they are, how to reach them and what they work on."""

    class ProgramType(models.TextChoices):
        BS_INTERN = "BS Intern", "BS Intern"
        BS_PROJECT = "BS Project", "BS Project"
        MS_THESIS = "MS Thesis", "MS Thesis"
        PHD_THESIS = "PhD Thesis", "PhD Thesis"

    class SupervisionRole(models.TextChoices):
        SUPERVISOR = "Supervisor", "Supervisor"
        CO_SUPERVISOR = "Co-supervisor", "Co-supervisor"

    program_type = models.CharField(max_length=20, choices=ProgramType.choices)
    supervision_role = models.CharField(max_length=20, choices=SupervisionRole.choices)

    # student info
    student_name = models.CharField(max_length=255)
    registration_number = models.CharField(max_length=100)
    semester = models.CharField(max_length=100)
    date_of_immatriculation = models.DateField()
    expected_date_of_completion = models.DateField()
    department = models.CharField(max_length=255)
    faculty = models.CharField(max_length=255)
    university_name = models.CharField(max_length=255)
    university_address = models.TextField()

    # contact info
    father_name = models.CharField(max_length=255)
    mother_name = models.CharField(max_length=255)
    whatsapp_number = models.CharField(max_length=20)
    email = models.EmailField(max_length=255)
    emergency_contact_number = models.CharField(max_length=20)
    present_address = models.TextField()
    permanent_address = models.TextField()
    date_of_birth = models.DateField()

    research_title = models.TextField()

    profile_picture = models.FileField(
        upload_to=StudentUploadPath("profile-pictures", "profilePicture"),
        max_length=500, blank=True, null=True, validators=image_validators,
    )
    concept_note = models.FileField(
        upload_to=StudentUploadPath("concept-notes", "conceptNote"),
        max_length=500, blank=True, null=True, validators=document_validators,
    )
    research_proposal = models.FileField(
        upload_to=StudentUploadPath("research-proposals", "researchProposal"),
        max_length=500, blank=True, null=True, validators=document_validators,
    )
    thesis_report = models.FileField(
        upload_to=StudentUploadPath("thesis-reports", "thesisReport"),
        max_length=500, blank=True, null=True, validators=document_validators,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    FILE_FIELDS = ("profile_picture", "concept_note", "research_proposal", "thesis_report")

    class Meta:
        db_table = "students"
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.student_name} ({self.registration_number})"

    def stored_files(self) -> list:
        """`(storage, name)` of every stored document and gallery image."""
        files = [
            (getattr(self, name).storage, getattr(self, name).name)
            for name in self.FILE_FIELDS
            if getattr(self, name)
        ]
        files += [(image.image.storage, image.image.name) for image in self.gallery_images.all()]
        return files


class StudentGalleryImage(models.Model):
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="gallery_images")
    image = models.FileField(
        upload_to=StudentUploadPath("gallery", "galleryImages"),
        max_length=500, validators=image_validators,
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "student_gallery_images"
        ordering = ["id"]

    def __str__(self) -> str:
        return self.image.name
