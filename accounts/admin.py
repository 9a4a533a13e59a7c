from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User


@admin.register(User)
class PortalUserAdmin(UserAdmin):
    list_display = ('email', 'name', 'division', 'is_active', 'is_staff')
    list_filter = ('division', 'is_active', 'is_staff')
    search_fields = ('email', 'name', 'username')
    ordering = ('name',)
    fieldsets = UserAdmin.fieldsets + (
        ('Division', {'fields': ('name', 'division')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Division', {'fields': ('name', 'email', 'division')}),
    )
