import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("payments", "0001_initial"),
        ("projects", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="project",
            name="payment",
            field=models.ForeignKey(blank=True, help_text="Main payment record for this project", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="payments.paymentrecord"),
        ),
    ]
