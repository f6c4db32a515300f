from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='EnrollmentRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('roll', models.CharField(db_index=True, max_length=64)),
                ('name', models.CharField(blank=True, max_length=255)),
                ('department', models.CharField(max_length=64)),
                ('year', models.CharField(max_length=16)),
                ('course_code', models.CharField(max_length=64)),
                ('attended_adjustment', models.IntegerField(default=0)),
                ('total_classes_adjustment', models.IntegerField(default=0)),
                ('submission_adjustments', models.JSONField(blank=True, default=dict)),
                ('login_disabled', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='enrollments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Enrollment Record',
                'verbose_name_plural': 'Enrollment Records',
                'ordering': ('roll', 'pk'),
                'unique_together': {('roll', 'course_code')},
            },
        ),
        migrations.CreateModel(
            name='AttendancePolicy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('default_requirement', models.FloatField(default=70)),
                ('rules', models.JSONField(blank=True, default=dict)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Attendance Policy',
                'verbose_name_plural': 'Attendance Policies',
            },
        ),
        migrations.CreateModel(
            name='AttendanceRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('time_slot', models.CharField(blank=True, max_length=32)),
                ('course_code', models.CharField(max_length=64)),
                ('teacher_name', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('absent_students', models.ManyToManyField(blank=True, related_name='absent_in', to='academics.enrollmentrecord')),
                ('present_students', models.ManyToManyField(blank=True, related_name='present_in', to='academics.enrollmentrecord')),
            ],
            options={
                'verbose_name': 'Attendance Record',
                'verbose_name_plural': 'Attendance Records',
                'ordering': ('-date', 'time_slot'),
                'unique_together': {('date', 'time_slot', 'course_code', 'teacher_name')},
            },
        ),
    ]
