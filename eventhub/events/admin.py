from django.contrib import admin

from eventhub.events import models


class EventAttendeeInline(admin.TabularInline):
    model = models.EventAttendee
    extra = 0
    raw_id_fields = ["user"]
    readonly_fields = ["joined_at"]


@admin.register(models.Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "category", "date", "location", "creator"]
    search_fields = ["title", "description", "location"]
    list_filter = ["category", "date"]
    raw_id_fields = ["creator"]
    readonly_fields = ["created_at"]
    inlines = [EventAttendeeInline]
