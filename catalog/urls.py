"""URL routes for the catalog app."""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import GigViewSet, ProductViewSet, StoreViewSet

router = SimpleRouter()
router.register(r"stores", StoreViewSet, basename="store")
router.register(r"products", ProductViewSet, basename="product")
router.register(r"gigs", GigViewSet, basename="gig")

urlpatterns = [path("", include(router.urls))]
