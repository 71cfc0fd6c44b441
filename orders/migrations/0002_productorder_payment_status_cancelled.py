from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="productorder",
            name="payment_status",
            field=models.CharField(
                choices=[
                    ("REQUIRES_PAYMENT", "Requires payment"),
                    ("SUCCEEDED", "Succeeded"),
                    ("CANCELLED", "Cancelled"),
                ],
                default="REQUIRES_PAYMENT",
                max_length=20,
            ),
        ),
    ]
