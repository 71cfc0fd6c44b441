"""Viewsets for stores, store products and gigs.

Reads are public; writes require a seller account and ownership of the
target store or gig.
"""

from common.permissions import OWNER, SELLER, IsSeller, authorize
from django_filters import rest_framework as filters
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.permissions import SAFE_METHODS, AllowAny, IsAuthenticated

from .models import Gig, Product, Store
from .serializers import GigSerializer, ProductSerializer, StoreSerializer


class SellerWriteMixin:
    """Public reads, seller-only writes."""

    def get_permissions(self):
        if self.request.method in SAFE_METHODS:
            return [AllowAny()]
        return [IsAuthenticated(), IsSeller()]


@extend_schema_view(
    list=extend_schema(summary="List stores", tags=["Catalog Endpoints"]),
    retrieve=extend_schema(summary="Get store", tags=["Catalog Endpoints"]),
    create=extend_schema(summary="Create store", tags=["Catalog Endpoints"]),
)
class StoreViewSet(SellerWriteMixin, viewsets.ModelViewSet):
    serializer_class = StoreSerializer
    http_method_names = ["get", "post", "patch"]

    def get_queryset(self):
        return Store.objects.filter(is_active=True) if self.action == "list" else Store.objects.all()

    def perform_create(self, serializer):
        serializer.save(owner=self.request.user)

    def perform_update(self, serializer):
        authorize(self.request.user, serializer.instance, OWNER, detail="Only the store owner can edit the store.")
        serializer.save()


class ProductFilter(filters.FilterSet):
    class Meta:
        model = Product
        fields = ["store", "is_active"]


@extend_schema_view(
    list=extend_schema(summary="List products", tags=["Catalog Endpoints"]),
    retrieve=extend_schema(summary="Get product", tags=["Catalog Endpoints"]),
    create=extend_schema(summary="Create product", tags=["Catalog Endpoints"]),
)
class ProductViewSet(SellerWriteMixin, viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    filterset_class = ProductFilter
    http_method_names = ["get", "post", "patch"]

    def get_queryset(self):
        return Product.objects.select_related("store").order_by("-id")

    def perform_create(self, serializer):
        store = serializer.validated_data["store"]
        authorize(self.request.user, store, OWNER, detail="Only the store owner can add products.")
        serializer.save()

    def perform_update(self, serializer):
        authorize(self.request.user, serializer.instance.store, OWNER, detail="Only the store owner can edit products.")
        store = serializer.validated_data.get("store")
        if store is not None:
            authorize(self.request.user, store, OWNER, detail="Only the store owner can add products.")
        serializer.save()


@extend_schema_view(
    list=extend_schema(summary="List gigs", tags=["Catalog Endpoints"]),
    retrieve=extend_schema(summary="Get gig", tags=["Catalog Endpoints"]),
    create=extend_schema(summary="Create gig", tags=["Catalog Endpoints"]),
)
class GigViewSet(SellerWriteMixin, viewsets.ModelViewSet):
    serializer_class = GigSerializer
    http_method_names = ["get", "post", "patch"]
    filterset_fields = ["seller", "is_active"]

    def get_queryset(self):
        return Gig.objects.order_by("-id")

    def perform_create(self, serializer):
        serializer.save(seller=self.request.user)

    def perform_update(self, serializer):
        authorize(self.request.user, serializer.instance, SELLER, detail="Only the gig owner can edit the gig.")
        serializer.save()
