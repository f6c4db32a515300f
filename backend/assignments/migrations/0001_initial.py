from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('academics', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Assignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('type', models.CharField(choices=[('manual', 'Manual'), ('randomized', 'Randomized'), ('batch_attendance', 'Batch (Attendance Based)'), ('personalized', 'Personalized')], default='manual', max_length=32)),
                ('target_course', models.CharField(blank=True, default='', max_length=64)),
                ('target_departments', models.JSONField(blank=True, default=list)),
                ('target_year', models.CharField(blank=True, default='', max_length=16)),
                ('faculty_name', models.CharField(blank=True, default='', max_length=255)),
                ('created_by', models.CharField(blank=True, default='', max_length=255)),
                ('script_url', models.URLField(blank=True, default='', max_length=1024)),
                ('questions', models.JSONField(blank=True, default=list)),
                ('total_marks', models.IntegerField(default=0)),
                ('question_count', models.PositiveIntegerField(blank=True, null=True)),
                ('question_pool', models.JSONField(blank=True, default=list)),
                ('rules', models.JSONField(blank=True, default=list)),
                ('topic_weights', models.JSONField(blank=True, default=list)),
                ('start_time', models.DateTimeField(blank=True, null=True)),
                ('deadline', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('target_students', models.ManyToManyField(blank=True, related_name='personalized_assignments', to='academics.enrollmentrecord')),
            ],
            options={
                'ordering': ('-created_at',),
            },
        ),
        migrations.CreateModel(
            name='FacultyConfig',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('faculty_name', models.CharField(db_index=True, max_length=255)),
                ('course', models.CharField(blank=True, default='', max_length=64)),
                ('script_url', models.URLField(blank=True, default='', max_length=1024)),
            ],
            options={
                'verbose_name': 'Faculty Config',
                'verbose_name_plural': 'Faculty Configs',
                'ordering': ('faculty_name', 'course'),
            },
        ),
        migrations.CreateModel(
            name='StudentAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_roll', models.CharField(db_index=True, max_length=64)),
                ('question_ids', models.JSONField(default=list)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('submitted', 'Submitted'), ('graded', 'Graded')], default='pending', max_length=16)),
                ('submitted_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('assignment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='student_assignments', to='assignments.assignment')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='student_assignments', to='academics.enrollmentrecord')),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('assignment', 'student_roll'), name='unique_allocation_per_student_roll')],
            },
        ),
    ]
