from django.contrib import admin
from .models import User, Venue, Worker, VenueStaff

@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'phone_number', 'is_venue_owner', 'is_worker', 'is_superuser')
    list_filter = ('is_superuser',)
    search_fields = ('username', 'email', 'phone_number')

@admin.register(Venue)
class VenueAdmin(admin.ModelAdmin):
    list_display = ('business_name', 'user', 'location')
    search_fields = ('business_name', 'user__username', 'user__email')

@admin.register(Worker)
class WorkerAdmin(admin.ModelAdmin):
    list_display = ('user', 'location', 'hourly_rate')
    search_fields = ('user__username', 'user__email')

@admin.register(VenueStaff)
class VenueStaffAdmin(admin.ModelAdmin):
    list_display = ('venue', 'worker', 'role', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('venue__business_name', 'worker__user__username')
