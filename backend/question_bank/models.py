from django.db import models


class Question(models.Model):
    TYPE_BROAD = 'broad'
    TYPE_MCQ = 'mcq'
    TYPE_BLANKS = 'blanks'
    TYPE_CHOICES = (
        (TYPE_BROAD, 'Broad'),
        (TYPE_MCQ, 'Multiple Choice'),
        (TYPE_BLANKS, 'Fill in the Blanks'),
    )

    # External identifier carried over from uploaded question sheets.
    code = models.CharField(max_length=64, unique=True)
    text = models.TextField()
    latex = models.TextField(blank=True, default='')
    type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    topic = models.CharField(max_length=255, db_index=True)
    subtopic = models.CharField(max_length=255)
    image = models.TextField(blank=True, default='')
    uploaded_by = models.CharField(max_length=255)
    faculty_name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ('topic', 'code')

    def __str__(self) -> str:
        return f"{self.code}: {self.text[:50]}"
