"""
Contact Form Django Admin Configuration
"""
from django.contrib import admin
from .models import ContactSubmission


@admin.register(ContactSubmission)
class ContactSubmissionAdmin(admin.ModelAdmin):
    """Read-only admin interface for contact submissions."""

    list_display = [
        'reference', 'name', 'email', 'subject', 'service_interest',
        'captcha_score', 'created_at'
    ]

    list_filter = [
        'service_interest', 'budget_range', 'created_at'
    ]

    search_fields = [
        'name', 'email', 'company', 'subject', 'message'
    ]

    readonly_fields = [
        'id', 'reference', 'name', 'email', 'phone', 'country_code', 'company',
        'subject', 'service_interest', 'budget_range', 'message',
        'captcha_score', 'ip_address', 'user_agent', 'created_at'
    ]

    fieldsets = (
        ('Contact Information', {
            'fields': ('reference', 'name', 'email', 'country_code', 'phone', 'company')
        }),
        ('Inquiry', {
            'fields': ('subject', 'service_interest', 'budget_range', 'message')
        }),
        ('Security & Tracking', {
            'fields': ('captcha_score', 'ip_address', 'user_agent'),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('id', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    def has_add_permission(self, request):
        """Submissions only come in through the public form."""
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        """Only super admins can delete."""
        return request.user.is_superuser
