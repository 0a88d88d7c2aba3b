# customers/admin.py

from django.contrib import admin

from customers.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "email", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("first_name", "last_name", "email")
