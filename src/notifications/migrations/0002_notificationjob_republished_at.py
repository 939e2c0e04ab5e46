from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("notifications", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="notificationjob",
            name="republished_at",
            field=models.DateTimeField(
                blank=True, help_text="When the sweeper last republished this job to the broker", null=True
            ),
        ),
    ]
