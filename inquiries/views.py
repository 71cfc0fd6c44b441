"""Inquiry endpoints: open a negotiation, counter-offer, accept or reject, cancel."""

from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import selectors, services
from .serializers import InquiryCreateSerializer, InquirySerializer, InquiryUpdateSerializer


class InquiryListCreateView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InquirySerializer
    throttle_scope = "inquiries"

    def get_queryset(self):
        return selectors.inquiries_for_user(self.request.user, role=self.request.query_params.get("role"))

    @extend_schema(
        tags=["Inquiry Endpoints"],
        summary="List my inquiries",
        description="Inquiries the caller sent as buyer or received as supplier, newest first.",
        parameters=[
            OpenApiParameter(name="role", description="buyer or supplier", required=False, type=str),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Inquiry Endpoints"],
        summary="Create inquiry",
        request=InquiryCreateSerializer,
        responses={201: InquirySerializer},
        examples=[
            OpenApiExample(
                "Bulk inquiry",
                value={"gig_id": 3, "supplier_id": 7, "requested_quantity": 100, "requested_price": "5.00"},
                request_only=True,
            )
        ],
    )
    def post(self, request):
        s = InquiryCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        inquiry = services.create_inquiry(buyer=request.user, **s.validated_data)
        return Response(InquirySerializer(inquiry).data, status=status.HTTP_201_CREATED)


class InquiryDetailView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "inquiries"

    @extend_schema(tags=["Inquiry Endpoints"], summary="Get inquiry", responses={200: InquirySerializer})
    def get(self, request, inquiry_id: int):
        inquiry = services.get_inquiry(inquiry_id=inquiry_id, actor=request.user)
        return Response(InquirySerializer(inquiry).data)

    @extend_schema(
        tags=["Inquiry Endpoints"],
        summary="Negotiate inquiry",
        description=(
            "Counter-offer (round increments), accept (`status=ACCEPTED` freezes final quantity and price) "
            "or reject (`status=REJECTED`). Finalized inquiries cannot change."
        ),
        request=InquiryUpdateSerializer,
        responses={200: InquirySerializer},
        examples=[
            OpenApiExample(
                "Counter-offer", value={"proposed_quantity": 80, "proposed_price": "5.50"}, request_only=True
            ),
            OpenApiExample("Accept", value={"status": "ACCEPTED"}, request_only=True),
        ],
    )
    def put(self, request, inquiry_id: int):
        s = InquiryUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        inquiry = services.update_inquiry(inquiry_id=inquiry_id, actor=request.user, **s.validated_data)
        return Response(InquirySerializer(inquiry).data)

    @extend_schema(tags=["Inquiry Endpoints"], summary="Cancel pending inquiry", responses={204: None})
    def delete(self, request, inquiry_id: int):
        services.cancel_inquiry(inquiry_id=inquiry_id, actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
