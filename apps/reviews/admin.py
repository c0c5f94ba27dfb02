from django.contrib import admin
from .models import Review

@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('job', 'reviewer', 'recipient', 'recipient_type', 'rating', 'created_at')
    list_filter = ('rating', 'recipient_type')
    search_fields = ('reviewer__username', 'recipient__username', 'job__title')

    def has_change_permission(self, request, obj=None):
        return False
