from django.contrib import admin
from .models import Customer

@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'segment', 'agent_type', 'subscription_start_date', 'source_campaign')
    list_filter = ('segment', 'agent_type', 'source_campaign')
    search_fields = ('name', 'email')
