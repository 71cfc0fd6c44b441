"""URL routes for the inquiries app (v1)."""

from django.urls import path

from .views import InquiryDetailView, InquiryListCreateView

urlpatterns = [
    path("", InquiryListCreateView.as_view(), name="inquiry-list"),
    path("<int:inquiry_id>/", InquiryDetailView.as_view(), name="inquiry-detail"),
]
