"""
Django admin configuration for the marketplace models.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import Account, Item, Message, Report, Review, Trade, University, User


@admin.register(University)
class UniversityAdmin(admin.ModelAdmin):
    list_display = ['name', 'domain', 'location', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name', 'domain', 'location']
    ordering = ['name']


class AccountInline(admin.TabularInline):
    """Accounts are shown read-only; password hashes are never editable here."""
    model = Account
    extra = 0
    fields = ['provider_id', 'account_id', 'created_at']
    readonly_fields = ['provider_id', 'account_id', 'created_at']
    can_delete = False


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Custom admin interface for User model.

    Extends Django's UserAdmin with the marketplace profile fields.
    Reputation and trade counters are read-only; they are maintained by
    reviews and completed trades.
    """

    list_display = [
        'email',
        'name',
        'university',
        'reputation_score',
        'total_trades',
        'email_verified',
        'is_staff',
        'is_active',
        'created_at',
    ]

    list_filter = [
        'email_verified',
        'is_staff',
        'is_superuser',
        'is_active',
        'university',
        'created_at',
    ]

    search_fields = [
        'email',
        'name',
        'major',
    ]

    ordering = ['-created_at']

    fieldsets = (
        (None, {
            'fields': ('username', 'email')
        }),
        (_('Profile'), {
            'fields': (
                'name',
                'university',
                'major',
                'graduation_year',
                'dorm_location',
                'phone_number',
                'profile_image',
                'email_verified',
            )
        }),
        (_('Reputation'), {
            'fields': ('reputation_score', 'total_trades')
        }),
        (_('Permissions'), {
            'fields': (
                'is_active',
                'is_staff',
                'is_superuser',
                'groups',
                'user_permissions',
            ),
            'classes': ('collapse',),
        }),
        (_('Important Dates'), {
            'fields': ('last_login', 'last_active', 'date_joined', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': (
                'username',
                'email',
                'name',
                'university',
                'password1',
                'password2',
            ),
        }),
    )

    readonly_fields = [
        'reputation_score',
        'total_trades',
        'created_at',
        'updated_at',
        'last_login',
        'last_active',
        'date_joined',
    ]

    inlines = [AccountInline]

    date_hierarchy = 'created_at'

    list_per_page = 25

    def get_readonly_fields(self, request, obj=None):
        if obj:
            return self.readonly_fields
        return []


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = [
        'title',
        'owner',
        'university',
        'category',
        'condition',
        'status',
        'created_at',
    ]
    list_filter = ['status', 'category', 'condition', 'university', 'created_at']
    search_fields = ['title', 'description', 'owner__email']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    list_per_page = 25

    fieldsets = (
        (None, {
            'fields': ('owner', 'university', 'title', 'description')
        }),
        (_('Details'), {
            'fields': (
                'category',
                'condition',
                'image_urls',
                'estimated_value',
                'location',
                'looking_for',
                'open_to_offers',
                'status',
            )
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )


@admin.register(Trade)
class TradeAdmin(admin.ModelAdmin):
    """
    Trades are inspected, not edited: status changes go through the
    lifecycle operations so item reservations stay consistent.
    """

    list_display = [
        'id',
        'sender',
        'receiver',
        'status',
        'sender_confirmed',
        'receiver_confirmed',
        'created_at',
        'completed_at',
    ]
    list_filter = ['status', 'created_at', 'completed_at']
    search_fields = ['sender__email', 'receiver__email', 'message']
    readonly_fields = [
        'sender',
        'receiver',
        'sender_items',
        'receiver_items',
        'status',
        'sender_confirmed',
        'receiver_confirmed',
        'completed_at',
        'created_at',
        'updated_at',
    ]
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    list_per_page = 25


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ['id', 'sender', 'receiver', 'item', 'trade', 'is_read', 'created_at']
    list_filter = ['is_read', 'created_at']
    search_fields = ['sender__email', 'receiver__email', 'content']
    readonly_fields = ['created_at', 'read_at']
    ordering = ['-created_at']
    list_per_page = 50


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    """Admin interface for Review model."""

    list_display = [
        'id',
        'reviewer',
        'reviewee',
        'trade',
        'rating',
        'created_at',
    ]

    list_filter = [
        'rating',
        'created_at',
    ]

    search_fields = [
        'reviewer__email',
        'reviewee__email',
        'comment',
    ]

    readonly_fields = ['created_at']

    ordering = ['-created_at']

    date_hierarchy = 'created_at'

    list_per_page = 25


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = [
        'id',
        'reason',
        'reporter',
        'item',
        'reported_user',
        'status',
        'resolved_by',
        'created_at',
    ]
    list_filter = ['status', 'reason', 'created_at']
    search_fields = ['reporter__email', 'reported_user__email', 'item__title', 'description']
    readonly_fields = ['reporter', 'created_at', 'updated_at', 'resolved_at']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    list_per_page = 25
