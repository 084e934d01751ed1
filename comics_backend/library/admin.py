# library/admin.py

from django.contrib import admin

from library.models import ComicBookmark, UserComicProgress, UserLibrary


@admin.register(UserLibrary)
class UserLibraryAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "comic",
        "access_type",
        "purchase_price",
        "purchased_at",
        "is_favorite",
        "rating",
        "completion_percentage",
        "last_accessed_at",
    )
    list_filter = ("access_type", "is_favorite")
    search_fields = ("user__email", "comic__title")
    readonly_fields = ("created_at", "updated_at", "total_reading_time", "completion_percentage")
    autocomplete_fields = ("user", "comic")


@admin.register(UserComicProgress)
class UserComicProgressAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "comic",
        "current_page",
        "total_pages",
        "progress_percentage",
        "is_completed",
        "reading_time_minutes",
        "last_read_at",
    )
    list_filter = ("is_completed", "is_bookmarked")
    search_fields = ("user__email", "comic__title")
    readonly_fields = (
        "reading_sessions",
        "total_reading_sessions",
        "average_session_duration",
        "pages_per_session_avg",
        "reading_speed",
        "total_time_paused_minutes",
        "bookmark_count",
        "last_bookmark_at",
        "created_at",
        "updated_at",
    )


@admin.register(ComicBookmark)
class ComicBookmarkAdmin(admin.ModelAdmin):
    list_display = ("user", "comic", "page_number", "created_at")
    search_fields = ("user__email", "comic__title", "note")
