# comics/admin.py
"""
=====================================================
PATH: comics/admin.py
=====================================================

Catalog admin.

- Pages are edited inline (ordered by page_number).
- Rating / counter columns are read-only: they are maintained by services.
- Bulk actions: show / hide, mark free, publish now.
"""

from __future__ import annotations

from django.contrib import admin
from django.utils import timezone

from comics.models import Comic, ComicComment, ComicPage, ComicView


class ComicPageInline(admin.TabularInline):
    model = ComicPage
    extra = 0
    ordering = ("page_number",)
    fields = ("page_number", "image_url", "image_path", "file_size")
    readonly_fields = ("file_size",)


@admin.register(Comic)
class ComicAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "author",
        "genre",
        "is_free",
        "price",
        "is_visible",
        "published_at",
        "average_rating",
        "total_readers",
        "view_count",
    )
    list_filter = ("is_visible", "is_free", "genre", "has_mature_content", "language")
    search_fields = ("title", "author", "series", "publisher", "slug")
    ordering = ("-created_at",)
    readonly_fields = (
        "slug",
        "average_rating",
        "total_ratings",
        "total_readers",
        "view_count",
        "likes_count",
        "created_at",
        "updated_at",
    )
    inlines = [ComicPageInline]
    actions = ["make_visible", "make_hidden", "mark_free", "publish_now"]

    @admin.action(description="Show selected comics")
    def make_visible(self, request, queryset):
        # per-row save so release notifications fire
        count = 0
        for comic in queryset.filter(is_visible=False):
            comic.is_visible = True
            comic.save(update_fields=["is_visible", "updated_at"])
            count += 1
        self.message_user(request, f"{count} comic(s) made visible.")

    @admin.action(description="Hide selected comics")
    def make_hidden(self, request, queryset):
        updated = queryset.update(is_visible=False, updated_at=timezone.now())
        self.message_user(request, f"{updated} comic(s) hidden.")

    @admin.action(description="Mark selected comics as free")
    def mark_free(self, request, queryset):
        updated = queryset.update(is_free=True, price=0, updated_at=timezone.now())
        self.message_user(request, f"{updated} comic(s) marked free.")

    @admin.action(description="Publish selected comics now")
    def publish_now(self, request, queryset):
        count = 0
        for comic in queryset.filter(published_at__isnull=True):
            comic.published_at = timezone.now()
            comic.save(update_fields=["published_at", "updated_at"])
            count += 1
        self.message_user(request, f"{count} comic(s) published.")


@admin.register(ComicComment)
class ComicCommentAdmin(admin.ModelAdmin):
    list_display = ("comic", "user", "is_spoiler", "is_approved", "created_at")
    list_filter = ("is_approved", "is_spoiler")
    search_fields = ("content", "comic__title", "user__email")
    readonly_fields = ("created_at", "updated_at")


@admin.register(ComicView)
class ComicViewAdmin(admin.ModelAdmin):
    list_display = ("comic", "user", "ip_address", "viewed_at")
    search_fields = ("comic__title", "user__email", "ip_address")
    readonly_fields = ("comic", "user", "session_key", "ip_address", "user_agent", "viewed_at")

    def has_add_permission(self, request):
        return False
