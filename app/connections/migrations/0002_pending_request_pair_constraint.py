# Generated manually - One pending request per user pair in either direction

import django.db.models.functions.comparison
from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("connections", "0001_initial"),
    ]

    operations = [
        migrations.RemoveConstraint(
            model_name="connectionrequest",
            name="unique_pending_connection_request",
        ),
        migrations.AddConstraint(
            model_name="connectionrequest",
            constraint=models.UniqueConstraint(
                django.db.models.functions.comparison.Least("sender", "receiver"),
                django.db.models.functions.comparison.Greatest("sender", "receiver"),
                condition=models.Q(("status", "pending")),
                name="unique_pending_connection_request_pair",
            ),
        ),
    ]
