import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Contest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("platform", models.CharField(choices=[("Codeforces", "Codeforces"), ("CodeChef", "CodeChef"), ("LeetCode", "LeetCode"), ("Other", "Other")], max_length=20)),
                ("date", models.DateTimeField(help_text="Contest start instant")),
                ("end_time", models.DateTimeField(blank=True, null=True)),
                ("link", models.URLField(max_length=500)),
                ("solution_link", models.URLField(blank=True, help_text="Solution video, set by an admin or matched on read", max_length=500, null=True)),
                ("status", models.CharField(blank=True, choices=[("upcoming", "Upcoming"), ("ongoing", "Ongoing"), ("finished", "Finished")], default="", max_length=20)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "contests",
                "ordering": ["date"],
                "indexes": [
                    models.Index(fields=["date"], name="contests_date_idx"),
                    models.Index(fields=["updated_at"], name="contests_updated_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("name", "platform"), name="unique_contest_per_platform"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Bookmark",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("contest", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="bookmarks", to="contests.contest")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="bookmarks", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "bookmarks",
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "contest"), name="unique_bookmark_per_user"),
                ],
            },
        ),
    ]
