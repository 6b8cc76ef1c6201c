"""
Custom permission classes for the Campus Trade marketplace.
"""

from rest_framework import permissions


class IsStaffUser(permissions.BasePermission):
    """
    Allows access only to staff users (report moderation).

    Usage:
        class MyView(APIView):
            permission_classes = [IsAuthenticated, IsStaffUser]
    """

    message = 'You do not have permission to perform this action. Staff privileges required.'

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        return request.user.is_staff


class IsItemOwner(permissions.BasePermission):
    """
    Object-level permission: only the owner of an item may change it.
    """

    message = 'Only the owner of this item can modify it.'

    def has_object_permission(self, request, view, obj):
        return obj.owner_id == request.user.pk


class IsMessageReceiver(permissions.BasePermission):
    """
    Object-level permission: only the receiver may mark a message read.
    """

    message = 'Only the receiver can mark this message as read.'

    def has_object_permission(self, request, view, obj):
        return obj.receiver_id == request.user.pk
