from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Question',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=64, unique=True)),
                ('text', models.TextField()),
                ('latex', models.TextField(blank=True, default='')),
                ('type', models.CharField(choices=[('broad', 'Broad'), ('mcq', 'Multiple Choice'), ('blanks', 'Fill in the Blanks')], max_length=16)),
                ('topic', models.CharField(db_index=True, max_length=255)),
                ('subtopic', models.CharField(max_length=255)),
                ('image', models.TextField(blank=True, default='')),
                ('uploaded_by', models.CharField(max_length=255)),
                ('faculty_name', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ('topic', 'code'),
            },
        ),
    ]
