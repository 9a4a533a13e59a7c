from django.contrib import admin
from .models import Document, Inspector, MandayRecord, ReturnRecord, TrackingEntry


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ('reference_number', 'subject', 'status', 'forwarded_to', 'working_days', 'deadline', 'updated_at')
    list_filter = ('status', 'forwarded_to', 'reference_year')
    search_fields = ('reference_number', 'subject', 'originating_office', 'fsis_reference_number')
    readonly_fields = ('reference_year', 'reference_sequence', 'created_by', 'created_at', 'updated_at')


@admin.register(TrackingEntry)
class TrackingEntryAdmin(admin.ModelAdmin):
    list_display = ('reference_number', 'action', 'forwarded_by', 'forwarded_to', 'status', 'action_timestamp')
    list_filter = ('action', 'status', 'action_timestamp')
    search_fields = ('reference_number', 'remarks')

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(MandayRecord)
class MandayRecordAdmin(admin.ModelAdmin):
    list_display = ('reference_number', 'inspector_name', 'division', 'original_working_days',
                    'actual_working_days', 'date_recorded')
    list_filter = ('division', 'date_recorded')
    search_fields = ('reference_number', 'inspector_name')


@admin.register(ReturnRecord)
class ReturnRecordAdmin(admin.ModelAdmin):
    list_display = ('reference_number', 'kind', 'forwarded_by', 'forwarded_to', 'recorded_at')
    list_filter = ('kind',)
    search_fields = ('reference_number', 'remarks')


@admin.register(Inspector)
class InspectorAdmin(admin.ModelAdmin):
    list_display = ('name', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name',)
