import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Inquiry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("requested_quantity", models.PositiveIntegerField()),
                ("requested_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("proposed_quantity", models.PositiveIntegerField(blank=True, null=True)),
                ("proposed_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("final_quantity", models.PositiveIntegerField(blank=True, null=True)),
                ("final_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("message", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("NEGOTIATING", "Negotiating"),
                            ("ACCEPTED", "Accepted"),
                            ("REJECTED", "Rejected"),
                        ],
                        db_index=True,
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("round", models.PositiveIntegerField(default=1)),
                (
                    "buyer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="inquiries_made",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "gig",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="inquiries", to="catalog.gig"
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="inquiries_received",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "inquiries",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["buyer", "created_at"], name="inquiry_buyer_created_idx"),
                    models.Index(fields=["supplier", "created_at"], name="inquiry_supplier_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(round__gte=1), name="inquiry_round_positive"),
                    models.CheckConstraint(
                        condition=models.Q(requested_quantity__gt=0), name="inquiry_requested_quantity_positive"
                    ),
                ],
            },
        ),
    ]
