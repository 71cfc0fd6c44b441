from django.contrib import admin

from .models import Inquiry


@admin.register(Inquiry)
class InquiryAdmin(admin.ModelAdmin):
    list_display = ("id", "gig", "buyer", "supplier", "status", "round", "final_quantity", "final_price", "created_at")
    list_filter = ("status",)
    search_fields = ("gig__title", "buyer__email", "supplier__email")
    date_hierarchy = "created_at"
