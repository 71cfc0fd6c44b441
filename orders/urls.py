"""URL routes for the orders app (v1).

`gig_urlpatterns` mount under /api/v1/gig-orders/ and `warehouse_urlpatterns`
under /api/v1/warehouse/.
"""

from django.urls import path

from .views import (
    AssignStockView,
    GigOrderCancelView,
    GigOrderDetailView,
    GigOrderListCreateView,
    GigOrderUpdateDeleteView,
    GigOrderUpdatesView,
    GigPaymentIntentView,
    ProductOrderCancelView,
    ProductOrderConfirmPaymentView,
    ProductOrderDetailView,
    ProductOrderListCreateView,
    ProductOrderStatusView,
    ProductOrderSummaryView,
)

gig_urlpatterns = [
    path("", GigOrderListCreateView.as_view(), name="gig-order-list"),
    path("create-payment-intent/", GigPaymentIntentView.as_view(), name="gig-order-payment-intent"),
    path("updates/<int:update_id>/", GigOrderUpdateDeleteView.as_view(), name="gig-order-update-delete"),
    path("<int:order_id>/", GigOrderDetailView.as_view(), name="gig-order-detail"),
    path("<int:order_id>/cancel/", GigOrderCancelView.as_view(), name="gig-order-cancel"),
    path("<int:order_id>/updates/", GigOrderUpdatesView.as_view(), name="gig-order-updates"),
]

warehouse_urlpatterns = [
    path("orders/", ProductOrderListCreateView.as_view(), name="product-order-list"),
    path("orders/summary/", ProductOrderSummaryView.as_view(), name="product-order-summary"),
    path("orders/<int:order_id>/", ProductOrderDetailView.as_view(), name="product-order-detail"),
    path("orders/<int:order_id>/status/", ProductOrderStatusView.as_view(), name="product-order-status"),
    path("orders/<int:order_id>/cancel/", ProductOrderCancelView.as_view(), name="product-order-cancel"),
    path(
        "orders/<int:order_id>/confirm-payment/",
        ProductOrderConfirmPaymentView.as_view(),
        name="product-order-confirm-payment",
    ),
    path("orders/<int:order_id>/assign-stock/", AssignStockView.as_view(), name="product-order-assign-stock"),
]
