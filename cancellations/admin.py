from django.contrib import admin
from .models import Cancellation

@admin.register(Cancellation)
class CancellationAdmin(admin.ModelAdmin):
    list_display = (
        'customer',
        'cancellation_date',
        'primary_reason',
        'closer_name',
        'days_on_platform',
        'saved_flag',
        'funds_disputed',
    )
    list_filter = ('saved_flag', 'funds_disputed', 'closer_name', 'primary_reason', 'customer__segment')
    search_fields = ('customer__name', 'customer__email', 'primary_reason', 'closer_name')
    readonly_fields = ('days_on_platform', 'created_at')
    raw_id_fields = ('customer',)
