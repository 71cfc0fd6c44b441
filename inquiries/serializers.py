from common.choices import InquiryStatus
from rest_framework import serializers

from .models import Inquiry


class InquirySerializer(serializers.ModelSerializer):
    gig_title = serializers.CharField(source="gig.title", read_only=True)

    class Meta:
        model = Inquiry
        fields = [
            "id",
            "gig",
            "gig_title",
            "buyer",
            "supplier",
            "requested_quantity",
            "requested_price",
            "proposed_quantity",
            "proposed_price",
            "final_quantity",
            "final_price",
            "message",
            "status",
            "round",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class InquiryCreateSerializer(serializers.Serializer):
    gig_id = serializers.IntegerField()
    supplier_id = serializers.IntegerField()
    requested_quantity = serializers.IntegerField(min_value=1)
    requested_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    message = serializers.CharField(required=False, allow_blank=True, default="")


class InquiryUpdateSerializer(serializers.Serializer):
    proposed_quantity = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    proposed_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    message = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    status = serializers.ChoiceField(choices=InquiryStatus.choices, required=False, allow_null=True)
