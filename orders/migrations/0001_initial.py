from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

ORDER_STATUS_CHOICES = [
    ("PENDING", "Pending"),
    ("ACCEPTED", "Accepted"),
    ("IN_PROGRESS", "In progress"),
    ("COMPLETED", "Completed"),
    ("DELIVERED", "Delivered"),
    ("CANCELLED", "Cancelled"),
]
REFUND_STATUS_CHOICES = [("NONE", "None"), ("SUCCEEDED", "Succeeded"), ("FAILED", "Failed")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        ("inquiries", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="GigOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("final_quantity", models.PositiveIntegerField()),
                ("final_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "status",
                    models.CharField(choices=ORDER_STATUS_CHOICES, db_index=True, default="PENDING", max_length=16),
                ),
                ("payment_intent_id", models.CharField(max_length=255, unique=True)),
                ("requirement", models.TextField()),
                ("shipping_address", models.TextField(blank=True, null=True)),
                ("delivery_method", models.CharField(blank=True, max_length=64, null=True)),
                ("refund_status", models.CharField(choices=REFUND_STATUS_CHOICES, default="NONE", max_length=16)),
                (
                    "buyer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="gig_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "gig",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="orders", to="catalog.gig"
                    ),
                ),
                (
                    "inquiry",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="order",
                        to="inquiries.inquiry",
                    ),
                ),
                (
                    "seller",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="gig_sales",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-id"],
                "indexes": [
                    models.Index(fields=["buyer", "status", "created_at"], name="gigorder_buyer_status_idx"),
                    models.Index(fields=["seller", "status", "created_at"], name="gigorder_seller_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(total_price__gte=0), name="gigorder_total_non_negative")
                ],
            },
        ),
        migrations.CreateModel(
            name="GigOrderUpdate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=200)),
                ("content", models.TextField()),
                ("expected_delivery_date", models.DateTimeField(blank=True, null=True)),
                (
                    "gig_order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="updates", to="orders.gigorder"
                    ),
                ),
                (
                    "seller",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="gig_order_updates",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="ProductOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "status",
                    models.CharField(choices=ORDER_STATUS_CHOICES, db_index=True, default="PENDING", max_length=16),
                ),
                ("payment_intent_id", models.CharField(blank=True, max_length=255, null=True, unique=True)),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("REQUIRES_PAYMENT", "Requires payment"), ("SUCCEEDED", "Succeeded")],
                        default="REQUIRES_PAYMENT",
                        max_length=20,
                    ),
                ),
                ("shipping_address", models.TextField(blank=True)),
                ("refund_status", models.CharField(choices=REFUND_STATUS_CHOICES, default="NONE", max_length=16)),
                (
                    "buyer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="product_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="orders", to="catalog.store"
                    ),
                ),
            ],
            options={
                "ordering": ["-id"],
                "indexes": [
                    models.Index(fields=["buyer", "status", "created_at"], name="productorder_buyer_status_idx"),
                    models.Index(fields=["store", "status", "created_at"], name="productorder_store_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total_price__gte=0), name="productorder_total_non_negative"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductOrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("quantity", models.PositiveIntegerField()),
                ("unit_price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.productorder"
                    ),
                ),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="order_items", to="catalog.product"
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "indexes": [models.Index(fields=["order", "product"], name="orderitem_order_product_idx")],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(unit_price__gte=0), name="orderitem_price_non_negative"),
                    models.CheckConstraint(condition=models.Q(quantity__gt=0), name="orderitem_quantity_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="IdempotencyKey",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("key", models.CharField(max_length=128)),
                ("scope", models.CharField(max_length=128)),
                ("path", models.CharField(max_length=255)),
                ("method", models.CharField(max_length=16)),
                ("request_hash", models.CharField(blank=True, max_length=64, null=True)),
                ("response_code", models.IntegerField(blank=True, null=True)),
                ("response_json", models.JSONField(blank=True, null=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("key", "scope", "path", "method"), name="uniq_idem_scope_path_method"
                    )
                ],
            },
        ),
    ]
