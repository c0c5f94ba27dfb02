from django.contrib import admin
from .models import Shift

@admin.register(Shift)
class ShiftAdmin(admin.ModelAdmin):
    list_display = ('id', 'worker', 'venue', 'job', 'clock_in_at', 'clock_out_at', 'status')
    list_filter = ('status', 'clock_in_method')
    search_fields = ('worker__user__username', 'venue__business_name')
    readonly_fields = ('clock_in_at', 'clock_out_at', 'created_at', 'updated_at')

    def has_delete_permission(self, request, obj=None):
        # Shifts are append-only
        return False
