from django.contrib import admin
from .models import Job, JobApplication

@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('title', 'venue', 'pay_rate', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('title', 'venue__business_name')

@admin.register(JobApplication)
class JobApplicationAdmin(admin.ModelAdmin):
    list_display = ('job', 'worker', 'status', 'applied_at')
    list_filter = ('status',)
    search_fields = ('job__title', 'worker__user__username')
