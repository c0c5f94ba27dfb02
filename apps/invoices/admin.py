from django.contrib import admin
from .models import Invoice

@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ('id', 'worker', 'payer', 'payment_type', 'total_amount', 'status', 'submitted_at')
    list_filter = ('status', 'payment_type')
    search_fields = ('worker__user__username', 'payer__username', 'description')
    readonly_fields = ('hours_worked', 'rate_per_hour', 'total_amount', 'submitted_at', 'processing_at', 'paid_at')

    def has_delete_permission(self, request, obj=None):
        return False
