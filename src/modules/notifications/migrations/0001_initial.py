import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="EmailTemplate",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=120, unique=True)),
                ("subject", models.CharField(max_length=255)),
                ("html_content", models.TextField(blank=True, default="")),
                ("text_content", models.TextField(blank=True, default="")),
            ],
            options={
                "db_table": "email_templates",
                "ordering": ["name"],
            },
        ),
    ]
