from django.contrib import admin

from .models import PaymentIntentClaim


@admin.register(PaymentIntentClaim)
class PaymentIntentClaimAdmin(admin.ModelAdmin):
    list_display = ("intent_id", "order_type", "order_id", "created_at")
    list_filter = ("order_type",)
    search_fields = ("intent_id",)
