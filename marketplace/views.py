"""
Remote procedures of the Campus Trade marketplace.

Each view serves one named procedure, e.g. POST /api/users.register/.
Queries are GET with query parameters, mutations are POST with a JSON body.
Successful responses carry `"success": true`; failures are rendered by
marketplace.exceptions.marketplace_exception_handler.
"""

import logging

from django.contrib.auth import authenticate, get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Q
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.generics import ListAPIView
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenBlacklistView

from . import trades
from .exceptions import Conflict, Unauthorized
from .models import Item, Message, Report, Review, Trade, University
from .permissions import IsItemOwner, IsMessageReceiver, IsStaffUser
from .serializers import (
    InboxQuerySerializer,
    ItemListQuerySerializer,
    ItemLookupSerializer,
    ItemSerializer,
    ItemUpdateSerializer,
    ItemWriteSerializer,
    LoginSerializer,
    MessageCreateSerializer,
    MessageLookupSerializer,
    MessageSerializer,
    PublicUserSerializer,
    ReportCreateSerializer,
    ReportListQuerySerializer,
    ReportResolveSerializer,
    ReportSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
    TradeActionSerializer,
    TradeProposalSerializer,
    TradeSerializer,
    UniversitySerializer,
    UserLookupSerializer,
    UserProfileSerializer,
    UserProfileUpdateSerializer,
    UserRegistrationSerializer,
    UserSummarySerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)


class ClientIPMixin:

    def get_client_ip(self, request):
        """
        Get client IP address from request.
        Handles proxy headers for accurate IP detection.
        """
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            ip = x_forwarded_for.split(',')[0]
        else:
            ip = request.META.get('REMOTE_ADDR')
        return ip


def _trade_queryset():
    return Trade.objects.prefetch_related('sender_items', 'receiver_items')


# ============================================================================
# Users
# ============================================================================

class UserRegistrationView(ClientIPMixin, APIView):
    """
    users.register

    Creates a user and its credentials account in one transaction.

    POST /api/users.register/
    Request body: {
        "email": "a@uni.edu",
        "password": "password1",
        "name": "Alice",
        "universityId": "<uuid>",
        "major": "Physics"
    }

    Success response (201):
    {"success": true, "message": "...", "user": {"id": "...", "email": "...", "name": "..."}}

    Error responses:
    - 400 VALIDATION: invalid input or email outside the university domain
    - 404 NOT_FOUND: unknown or inactive university
    - 409 CONFLICT: email already registered
    """
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            with transaction.atomic():
                user = serializer.save()
        except IntegrityError:
            # Concurrent registration with the same email
            logger.warning(
                f"Registration race on duplicate email. "
                f"Email: {serializer.validated_data['email']}, IP: {self.get_client_ip(request)}"
            )
            raise Conflict('User with this email already exists')

        logger.info(
            f"User registered. User ID: {user.pk}, "
            f"University ID: {user.university_id}, IP: {self.get_client_ip(request)}"
        )

        return Response({
            'success': True,
            'message': 'Registration successful',
            'user': UserSummarySerializer(user).data,
        }, status=status.HTTP_201_CREATED)


class LoginView(ClientIPMixin, APIView):
    """
    users.login

    Security features:
    - Rate limiting through the 'login' throttle scope
    - One generic error message for every failure to prevent user enumeration
    - Failed login attempt logging for security monitoring
    - Case-insensitive email lookup

    POST /api/users.login/
    Request body: {"email": "a@uni.edu", "password": "password1"}

    Success response (200):
    {
        "success": true,
        "message": "Login successful",
        "user": {"id": "...", "email": "a@uni.edu", "name": "Alice"},
        "session": {"access": "<jwt>", "refresh": "<jwt>"}
    }

    Error response (401):
    {"success": false, "error": {"code": "UNAUTHORIZED", "message": "Invalid email or password"}}
    """
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'login'

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data['email'].lower().strip()
        password = serializer.validated_data['password']
        client_ip = self.get_client_ip(request)

        user = authenticate(request, email=email, password=password)
        if user is None:
            # Unknown email, wrong password and inactive account look the same
            logger.warning(f"Failed login attempt. Email: {email}, IP: {client_ip}")
            raise Unauthorized()

        user.touch_last_active()
        refresh = RefreshToken.for_user(user)

        logger.info(f"Successful login. Email: {email}, IP: {client_ip}")

        return Response({
            'success': True,
            'message': 'Login successful',
            'user': UserSummarySerializer(user).data,
            'session': {
                'access': str(refresh.access_token),
                'refresh': str(refresh),
            },
        }, status=status.HTTP_200_OK)


class LogoutView(TokenBlacklistView):
    """
    users.logout

    Blacklists the given refresh token so it cannot mint new access tokens.

    POST /api/users.logout/
    Request body: {"refresh": "<jwt>"}
    """

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)

        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise InvalidToken(e.args[0])

        return Response({
            'success': True,
            'message': 'Logged out',
        }, status=status.HTTP_200_OK)


class MeView(APIView):
    """
    users.me

    GET /api/users.me/
    Returns the full profile of the authenticated user.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        user = User.objects.select_related('university').filter(pk=request.user.pk).first()
        if user is None:
            raise NotFound('User not found.')

        return Response({
            'success': True,
            'user': UserProfileSerializer(user).data,
        })


class UpdateMeView(ClientIPMixin, APIView):
    """
    users.updateMe

    Partial update of name, major, graduationYear, dormLocation, phoneNumber
    and profileImage. Any other key is rejected with VALIDATION, so email,
    reputationScore and totalTrades cannot be changed here.

    POST /api/users.updateMe/
    Request body: {"major": "Mathematics", "graduationYear": 2027}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        with transaction.atomic():
            user = User.objects.select_for_update().filter(pk=request.user.pk).first()
            if user is None:
                raise NotFound('User not found.')

            serializer = UserProfileUpdateSerializer(user, data=request.data, partial=True)

            if not serializer.is_valid():
                logger.warning(
                    f"Profile update validation failed. "
                    f"User ID: {request.user.pk}, "
                    f"Fields: {sorted(serializer.errors)}, "
                    f"IP: {self.get_client_ip(request)}"
                )
                serializer.is_valid(raise_exception=True)

            user = serializer.save()

        logger.info(
            f"Profile updated. User ID: {user.pk}, "
            f"Fields: {sorted(serializer.validated_data)}"
        )

        user = User.objects.select_related('university').filter(pk=user.pk).first()
        if user is None:
            raise NotFound('User not found.')

        return Response({
            'success': True,
            'message': 'Profile updated successfully',
            'user': UserProfileSerializer(user).data,
        })


class UserDetailView(APIView):
    """
    users.getById

    GET /api/users.getById/?userId=<uuid>
    Public profile: no email or phone number.
    """
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        query = UserLookupSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        user = (
            User.objects
            .select_related('university')
            .filter(pk=query.validated_data['userId'], is_active=True)
            .first()
        )
        if user is None:
            raise NotFound('User not found.')

        return Response({
            'success': True,
            'user': PublicUserSerializer(user).data,
        })


class MyItemsView(APIView):
    """users.myItems: every item the caller owns, newest first."""
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        items = (
            Item.objects
            .filter(owner=request.user)
            .select_related('owner')
            .order_by('-created_at')
        )
        return Response({
            'success': True,
            'items': ItemSerializer(items, many=True).data,
        })


class MyTradesView(APIView):
    """users.myTrades: trades where the caller is sender or receiver, newest first."""
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        user_trades = (
            _trade_queryset()
            .filter(Q(sender=request.user) | Q(receiver=request.user))
            .order_by('-created_at')
        )
        return Response({
            'success': True,
            'trades': TradeSerializer(user_trades, many=True).data,
        })


class MyReviewsView(APIView):
    """users.myReviews: reviews given or received by the caller, newest first."""
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        reviews = (
            Review.objects
            .filter(Q(reviewer=request.user) | Q(reviewee=request.user))
            .select_related('reviewer')
            .order_by('-created_at')
        )
        return Response({
            'success': True,
            'reviews': ReviewSerializer(reviews, many=True).data,
        })


# ============================================================================
# Trades
# ============================================================================

class TradeProposeView(APIView):
    """
    trades.propose

    POST /api/trades.propose/
    Request body: {
        "receiverId": "<uuid>",
        "senderItemIds": ["<uuid>"],
        "receiverItemIds": ["<uuid>"],
        "message": "Swap?",
        "meetingLocation": "Library",
        "meetingTime": "2026-11-01T15:00:00Z"
    }

    Success response (201): {"success": true, "message": "...", "trade": {...}}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = TradeProposalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        trade = trades.propose_trade(
            sender=request.user,
            receiver_id=data['receiverId'],
            sender_item_ids=data['senderItemIds'],
            receiver_item_ids=data['receiverItemIds'],
            message=data.get('message', ''),
            meeting_location=data.get('meetingLocation', ''),
            meeting_time=data.get('meetingTime'),
        )

        return Response({
            'success': True,
            'message': 'Trade proposed',
            'trade': TradeSerializer(_trade_queryset().get(pk=trade.pk)).data,
        }, status=status.HTTP_201_CREATED)


class TradeTransitionView(APIView):
    """
    Base view for the trade lifecycle procedures.

    POST /api/trades.<action>/
    Request body: {"tradeId": "<uuid>"}

    Error responses:
    - 403 FORBIDDEN: caller is not allowed to act on this trade
    - 404 NOT_FOUND: trade does not exist
    - 409 CONFLICT: illegal transition or items no longer available
    """
    permission_classes = [IsAuthenticated]
    operation = None
    success_message = None

    def post(self, request, *args, **kwargs):
        serializer = TradeActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        trade = self.operation(request.user, serializer.validated_data['tradeId'])

        return Response({
            'success': True,
            'message': self.success_message,
            'trade': TradeSerializer(_trade_queryset().get(pk=trade.pk)).data,
        })


class TradeAcceptView(TradeTransitionView):
    """trades.accept: receiver accepts a pending trade; its items are reserved."""
    operation = staticmethod(trades.accept_trade)
    success_message = 'Trade accepted'


class TradeDeclineView(TradeTransitionView):
    """trades.decline: receiver declines a pending trade."""
    operation = staticmethod(trades.decline_trade)
    success_message = 'Trade declined'


class TradeConfirmView(TradeTransitionView):
    """trades.confirm: a party confirms an accepted trade; the second confirmation completes it."""
    operation = staticmethod(trades.confirm_trade)
    success_message = 'Trade confirmed'


class TradeCancelView(TradeTransitionView):
    """trades.cancel: either party cancels a pending or accepted trade."""
    operation = staticmethod(trades.cancel_trade)
    success_message = 'Trade cancelled'


class TradeDetailView(APIView):
    """
    trades.get

    GET /api/trades.get/?tradeId=<uuid>
    Only the two parties can see a trade.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        query = TradeActionSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        trade = trades.get_trade_for(request.user, query.validated_data['tradeId'])
        return Response({
            'success': True,
            'trade': TradeSerializer(trade).data,
        })


# ============================================================================
# Items
# ============================================================================

class ItemListPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'pageSize'
    max_page_size = 100

    def get_paginated_response(self, data):
        return Response({
            'success': True,
            'count': self.page.paginator.count,
            'next': self.get_next_link(),
            'previous': self.get_previous_link(),
            'items': data,
        })


class ItemCreateView(ClientIPMixin, APIView):
    """
    items.create

    The owner and university are taken from the caller; status starts AVAILABLE.

    POST /api/items.create/
    Request body: {
        "title": "Calculus textbook",
        "description": "Stewart, 8th edition",
        "category": "TEXTBOOKS",
        "condition": "GOOD",
        "imageUrls": ["https://..."],
        "estimatedValue": "25.00"
    }
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = ItemWriteSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        item = serializer.save()

        logger.info(
            f"Item listed. Item ID: {item.pk}, Owner ID: {request.user.pk}, "
            f"Category: {item.category}, IP: {self.get_client_ip(request)}"
        )

        return Response({
            'success': True,
            'message': 'Item listed',
            'item': ItemSerializer(item).data,
        }, status=status.HTTP_201_CREATED)


class ItemListView(ListAPIView):
    """
    items.list

    Public browsing of AVAILABLE items, newest first.

    Query parameters:
    - category: TEXTBOOKS, ELECTRONICS, ...
    - condition: NEW, LIKE_NEW, GOOD, FAIR, POOR
    - universityId: only items from one university
    - search: case-insensitive match on title or description
    - page, pageSize: pagination (20 per page by default)
    """
    permission_classes = [AllowAny]
    serializer_class = ItemSerializer
    pagination_class = ItemListPagination

    def get_queryset(self):
        query = ItemListQuerySerializer(data=self.request.query_params)
        query.is_valid(raise_exception=True)
        filters = query.validated_data

        queryset = Item.objects.filter(status=Item.AVAILABLE).select_related('owner')

        if 'category' in filters:
            queryset = queryset.filter(category=filters['category'])
        if 'condition' in filters:
            queryset = queryset.filter(condition=filters['condition'])
        if 'universityId' in filters:
            queryset = queryset.filter(university_id=filters['universityId'])
        if filters.get('search'):
            search = filters['search'].strip()
            queryset = queryset.filter(
                Q(title__icontains=search) | Q(description__icontains=search)
            )

        return queryset.order_by('-created_at')


class ItemDetailView(APIView):
    """
    items.get

    GET /api/items.get/?itemId=<uuid>
    Removed items are only visible to their owner.
    """
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        query = ItemLookupSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        item = Item.objects.select_related('owner').filter(pk=query.validated_data['itemId']).first()
        if item is None or (item.status == Item.REMOVED and item.owner_id != request.user.pk):
            raise NotFound('Item not found.')

        return Response({
            'success': True,
            'item': ItemSerializer(item).data,
        })


def _get_owned_item(request, view, item_id):
    item = Item.objects.select_related('owner').filter(pk=item_id).first()
    if item is None or item.status == Item.REMOVED:
        raise NotFound('Item not found.')

    permission = IsItemOwner()
    if not permission.has_object_permission(request, view, item):
        logger.warning(
            f"Unauthorized item modification attempt. "
            f"Item ID: {item.pk}, User ID: {request.user.pk}, "
            f"IP: {view.get_client_ip(request)}"
        )
        raise PermissionDenied(permission.message)

    return item


class ItemUpdateView(ClientIPMixin, APIView):
    """
    items.update

    POST /api/items.update/
    Request body: {"itemId": "<uuid>", "title": "...", "openToOffers": false}

    Only the owner may edit, and only while the item is AVAILABLE.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        lookup = ItemLookupSerializer(data=request.data)
        lookup.is_valid(raise_exception=True)

        item = _get_owned_item(request, self, lookup.validated_data['itemId'])

        serializer = ItemUpdateSerializer(
            item,
            data=request.data,
            partial=True,
            context={'request': request}
        )
        serializer.is_valid(raise_exception=True)
        item = serializer.save()

        logger.info(f"Item updated. Item ID: {item.pk}, Owner ID: {request.user.pk}")

        return Response({
            'success': True,
            'message': 'Item updated',
            'item': ItemSerializer(item).data,
        })


class ItemRemoveView(ClientIPMixin, APIView):
    """
    items.remove

    Soft delete: the item moves AVAILABLE -> REMOVED and disappears from
    listings. Items reserved by an accepted trade or already traded cannot
    be removed.

    POST /api/items.remove/
    Request body: {"itemId": "<uuid>"}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        lookup = ItemLookupSerializer(data=request.data)
        lookup.is_valid(raise_exception=True)

        item = _get_owned_item(request, self, lookup.validated_data['itemId'])

        removed = Item.objects.transition([item.pk], Item.AVAILABLE, Item.REMOVED)
        if not removed:
            item.refresh_from_db(fields=['status'])
            if item.status == Item.REMOVED:
                raise NotFound('Item not found.')
            raise Conflict(f'Only available items can be removed. This item is {item.status}.')

        logger.info(f"Item removed. Item ID: {item.pk}, Owner ID: {request.user.pk}")

        return Response({
            'success': True,
            'message': 'Item removed',
        })


# ============================================================================
# Messages
# ============================================================================

class MessageSendView(APIView):
    """
    messages.send

    POST /api/messages.send/
    Request body: {"receiverId": "<uuid>", "content": "Still available?", "itemId": "<uuid>"}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = MessageCreateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        message = serializer.save()

        logger.info(
            f"Message sent. Message ID: {message.pk}, "
            f"Sender ID: {message.sender_id}, Receiver ID: {message.receiver_id}"
        )

        return Response({
            'success': True,
            'message': 'Message sent',
            'data': MessageSerializer(message).data,
        }, status=status.HTTP_201_CREATED)


class InboxView(APIView):
    """
    messages.inbox

    GET /api/messages.inbox/?unread=true
    Messages received by the caller, newest first.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        query = InboxQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        messages = Message.objects.filter(receiver=request.user)
        if query.validated_data['unread']:
            messages = messages.filter(is_read=False)

        return Response({
            'success': True,
            'unreadCount': Message.objects.filter(receiver=request.user, is_read=False).count(),
            'messages': MessageSerializer(messages.order_by('-created_at'), many=True).data,
        })


class ConversationView(APIView):
    """
    messages.conversation

    GET /api/messages.conversation/?userId=<uuid>
    Messages exchanged between the caller and another user, oldest first.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        query = UserLookupSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        other_id = query.validated_data['userId']

        if not User.objects.filter(pk=other_id).exists():
            raise NotFound('User not found.')

        messages = Message.objects.filter(
            Q(sender=request.user, receiver_id=other_id)
            | Q(sender_id=other_id, receiver=request.user)
        ).order_by('created_at')

        return Response({
            'success': True,
            'messages': MessageSerializer(messages, many=True).data,
        })


class MessageMarkReadView(APIView):
    """
    messages.markRead

    POST /api/messages.markRead/
    Request body: {"messageId": "<uuid>"}
    Only the receiver can mark a message read; the first read time is kept.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        lookup = MessageLookupSerializer(data=request.data)
        lookup.is_valid(raise_exception=True)

        message = Message.objects.filter(pk=lookup.validated_data['messageId']).first()
        if message is None:
            raise NotFound('Message not found.')

        permission = IsMessageReceiver()
        if not permission.has_object_permission(request, self, message):
            raise PermissionDenied(permission.message)

        message.mark_read()

        return Response({
            'success': True,
            'message': 'Message marked as read',
            'data': MessageSerializer(message).data,
        })


# ============================================================================
# Reviews
# ============================================================================

class ReviewCreateView(APIView):
    """
    reviews.create

    Security features:
    - Requires JWT authentication
    - Validates the trade exists and is completed
    - Validates the caller took part in the trade
    - Reviewee is always the other party
    - One review per trade and reviewer (database constraint)

    POST /api/reviews.create/
    Request body: {"tradeId": "<uuid>", "rating": 5, "comment": "Smooth swap"}

    Error responses:
    - 400 VALIDATION: trade not completed, rating out of range
    - 403 FORBIDDEN: caller was not a party
    - 404 NOT_FOUND: trade does not exist
    - 409 CONFLICT: caller already reviewed this trade
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = ReviewCreateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)

        try:
            # The reputation signal runs in this transaction too
            with transaction.atomic():
                review = serializer.save()
        except IntegrityError:
            logger.warning(
                f"Review creation failed - duplicate review. "
                f"User ID: {request.user.pk}, "
                f"Trade ID: {request.data.get('tradeId')}"
            )
            raise Conflict('You have already reviewed this trade.')

        logger.info(
            f"Review created successfully. "
            f"Reviewer ID: {request.user.pk}, Trade ID: {review.trade_id}"
        )

        return Response({
            'success': True,
            'message': 'Review submitted',
            'review': ReviewSerializer(review).data,
        }, status=status.HTTP_201_CREATED)


class UserReviewsView(APIView):
    """
    reviews.forUser

    GET /api/reviews.forUser/?userId=<uuid>
    Public list of reviews a user received, newest first.
    """
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        query = UserLookupSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        user = User.objects.filter(pk=query.validated_data['userId'], is_active=True).first()
        if user is None:
            raise NotFound('User not found.')

        reviews = (
            Review.objects
            .filter(reviewee=user)
            .select_related('reviewer')
            .order_by('-created_at')
        )

        return Response({
            'success': True,
            'reputationScore': user.reputation_score,
            'reviews': ReviewSerializer(reviews, many=True).data,
        })


# ============================================================================
# Reports
# ============================================================================

class ReportCreateView(APIView):
    """
    reports.create

    POST /api/reports.create/
    Request body: {"reason": "SCAM", "description": "...", "itemId": "<uuid>"}
    At least one of itemId and reportedUserId is required.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = ReportCreateSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        report = serializer.save()

        logger.info(
            f"Report filed. Report ID: {report.pk}, Reason: {report.reason}, "
            f"Reporter ID: {request.user.pk}"
        )

        return Response({
            'success': True,
            'message': 'Report submitted',
            'report': ReportSerializer(report).data,
        }, status=status.HTTP_201_CREATED)


class ReportListView(APIView):
    """
    reports.list

    GET /api/reports.list/?status=PENDING
    Staff only.
    """
    permission_classes = [IsAuthenticated, IsStaffUser]

    def get(self, request, *args, **kwargs):
        query = ReportListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        reports = Report.objects.all()
        if 'status' in query.validated_data:
            reports = reports.filter(status=query.validated_data['status'])

        return Response({
            'success': True,
            'reports': ReportSerializer(reports.order_by('-created_at'), many=True).data,
        })


class ReportResolveView(ClientIPMixin, APIView):
    """
    reports.resolve

    POST /api/reports.resolve/
    Request body: {"reportId": "<uuid>", "status": "RESOLVED", "resolutionNote": "Item removed"}
    Staff only. PENDING -> INVESTIGATING -> RESOLVED / DISMISSED.
    """
    permission_classes = [IsAuthenticated, IsStaffUser]

    def post(self, request, *args, **kwargs):
        serializer = ReportResolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        with transaction.atomic():
            report = Report.objects.select_for_update().filter(pk=data['reportId']).first()
            if report is None:
                raise NotFound('Report not found.')

            if not report.can_transition_to(data['status']):
                raise Conflict(
                    f'Invalid report status transition from {report.status} to {data["status"]}.'
                )

            old_status = report.status
            report.resolve(request.user, data['status'], data.get('resolutionNote', ''))

        logger.info(
            f"Report status updated. Report ID: {report.pk}, "
            f"Old Status: {old_status}, New Status: {report.status}, "
            f"Staff ID: {request.user.pk}, IP: {self.get_client_ip(request)}"
        )

        return Response({
            'success': True,
            'message': 'Report updated',
            'report': ReportSerializer(report).data,
        })


# ============================================================================
# Universities
# ============================================================================

class UniversityListView(APIView):
    """universities.list: active universities, for the registration form."""
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        universities = University.objects.filter(is_active=True).order_by('name')
        return Response({
            'success': True,
            'universities': UniversitySerializer(universities, many=True).data,
        })
