"""Root URL configuration.

Every API route is versioned under /api/v1/; warehouse orders and their
shipments share the /api/v1/warehouse/ prefix.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from orders.urls import gig_urlpatterns, warehouse_urlpatterns

from .health import health

admin.site.site_header = "Marketplace Admin"
admin.site.index_title = "Admin"

urlpatterns = [
    path("admin/", admin.site.urls),
    # API schema and Swagger UI
    path("api/schema/", SpectacularAPIView.as_view(), name="api-schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="api-schema"), name="api-docs"),
    # Healthcheck
    path("health/", health, name="health"),
    # Versioned v1 routes only
    path("api/v1/", include("users.urls")),
    path("api/v1/catalog/", include("catalog.urls")),
    path("api/v1/inventory/", include("inventory.urls")),
    path("api/v1/inquiries/", include("inquiries.urls")),
    path("api/v1/gig-orders/", include(gig_urlpatterns)),
    path("api/v1/warehouse/", include(warehouse_urlpatterns)),
    path("api/v1/warehouse/", include("fulfillment.urls")),
]
