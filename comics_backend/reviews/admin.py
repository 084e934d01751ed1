# reviews/admin.py

from __future__ import annotations

from django.contrib import admin

from reviews.models import ComicReview, ReviewVote
from reviews.services.moderation import bulk_moderate


@admin.register(ComicReview)
class ComicReviewAdmin(admin.ModelAdmin):
    list_display = (
        "comic",
        "user",
        "rating",
        "is_spoiler",
        "is_approved",
        "moderated_at",
        "helpful_votes",
        "total_votes",
        "created_at",
    )
    list_filter = ("is_approved", "is_spoiler", "rating")
    search_fields = ("title", "content", "user__email", "comic__title")
    autocomplete_fields = ("user", "comic")
    readonly_fields = (
        "helpful_votes",
        "total_votes",
        "moderated_at",
        "moderated_by",
        "created_at",
        "updated_at",
    )
    actions = ["approve_selected", "reject_selected"]

    @admin.action(description="Approve selected reviews")
    def approve_selected(self, request, queryset):
        changed = bulk_moderate(
            review_ids=queryset.values_list("pk", flat=True),
            action="approve",
            moderator=request.user,
        )
        self.message_user(request, f"{changed} review(s) approved.")

    @admin.action(description="Reject selected reviews")
    def reject_selected(self, request, queryset):
        changed = bulk_moderate(
            review_ids=queryset.values_list("pk", flat=True),
            action="reject",
            moderator=request.user,
            reason="Rejected from admin",
        )
        self.message_user(request, f"{changed} review(s) rejected.")


@admin.register(ReviewVote)
class ReviewVoteAdmin(admin.ModelAdmin):
    list_display = ("review", "user", "is_helpful", "created_at")
    list_filter = ("is_helpful",)
    search_fields = ("user__email",)
    raw_id_fields = ("review", "user")
