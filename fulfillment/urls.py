"""Fulfillment routes, mounted under /api/v1/warehouse/ next to the order routes."""

from django.urls import path

from .views import CreateShipmentView, ShipmentDetailView, ShippingMethodListView, TrackingUpdateView

urlpatterns = [
    path("orders/<int:order_id>/ship/", CreateShipmentView.as_view(), name="shipment-create"),
    path("orders/<int:order_id>/track/", TrackingUpdateView.as_view(), name="shipment-track"),
    path("orders/<int:order_id>/shipment/", ShipmentDetailView.as_view(), name="shipment-detail"),
    path("shipping-methods/", ShippingMethodListView.as_view(), name="shipping-method-list"),
]
