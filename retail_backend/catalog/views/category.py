# catalog/views/category.py

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from catalog.models import Category
from catalog.serializers import CategorySerializer
from permissions.roles import CAP_CATALOG_EDIT, HasCapability


class CategoryViewSet(viewsets.ModelViewSet):
    """
    Category API

    Policy:
    - Any authenticated user can READ categories.
    - Writes require catalog.edit.
    """

    queryset = Category.objects.select_related("parent").all()
    serializer_class = CategorySerializer
    filterset_fields = ["is_active", "parent"]
    http_method_names = ["get", "post", "put", "patch", "head", "options"]

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [IsAuthenticated()]

        self.required_capability = CAP_CATALOG_EDIT
        return [IsAuthenticated(), HasCapability()]
