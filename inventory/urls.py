from django.urls import path

from .views import (
    AssignLocationView,
    LowStockReportView,
    ProductInventoryListView,
    ProductMovementListView,
    StockInView,
    StockOutView,
    StockReportView,
    WarehouseDetailView,
    WarehouseInventoryListView,
    WarehouseListCreateView,
    WarehouseUtilizationView,
)

urlpatterns = [
    path("stock-in/", StockInView.as_view(), name="inventory-stock-in"),
    path("stock-out/", StockOutView.as_view(), name="inventory-stock-out"),
    path("assign-location/", AssignLocationView.as_view(), name="inventory-assign-location"),
    path("movements/<int:product_id>/", ProductMovementListView.as_view(), name="inventory-movements"),
    path("products/<int:product_id>/", ProductInventoryListView.as_view(), name="inventory-product"),
    path("warehouses/", WarehouseListCreateView.as_view(), name="warehouse-list"),
    path("warehouses/<int:warehouse_id>/", WarehouseInventoryListView.as_view(), name="inventory-warehouse"),
    path("warehouses/<int:warehouse_id>/detail/", WarehouseDetailView.as_view(), name="warehouse-detail"),
    path("reports/stock/", StockReportView.as_view(), name="inventory-report-stock"),
    path("reports/low-stock/", LowStockReportView.as_view(), name="inventory-report-low-stock"),
    path("reports/utilization/", WarehouseUtilizationView.as_view(), name="inventory-report-utilization"),
]

# EOF
