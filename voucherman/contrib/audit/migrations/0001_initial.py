from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(db_index=True, max_length=50, verbose_name="action")),
                ("details", models.TextField(blank=True, verbose_name="details")),
                ("actor_identity", models.CharField(default="system", max_length=150, verbose_name="actor")),
                ("source_address", models.CharField(blank=True, max_length=100, verbose_name="source address")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "audit log entry",
                "verbose_name_plural": "audit log",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
