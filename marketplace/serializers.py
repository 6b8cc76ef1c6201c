"""
Input validation and response projections for the marketplace procedures.

Request and response keys are camelCase; each field maps to its snake_case
model attribute through `source`.
"""

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from rest_framework.exceptions import NotFound, PermissionDenied

from .exceptions import Conflict
from .models import Item, Message, Report, Review, Trade, University
from .validators import validate_phone_number

User = get_user_model()


class RejectUnknownFieldsMixin:
    """
    Fail validation when the payload carries keys the serializer does not declare.

    REST framework silently drops undeclared keys; for mutation endpoints
    that guard restricted fields we want the client told instead.
    """

    def validate(self, attrs):
        unknown = set(getattr(self, 'initial_data', {}) or {}) - set(self.fields)
        if unknown:
            raise serializers.ValidationError({
                field: ['This field is not allowed.'] for field in sorted(unknown)
            })
        return super().validate(attrs)


# ============================================================================
# Universities & Users
# ============================================================================

class UniversitySerializer(serializers.ModelSerializer):

    class Meta:
        model = University
        fields = ['id', 'name', 'domain', 'location']
        read_only_fields = fields


class UniversitySummarySerializer(serializers.ModelSerializer):

    class Meta:
        model = University
        fields = ['id', 'name']
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Reduced projection returned by register and login."""

    class Meta:
        model = User
        fields = ['id', 'email', 'name']
        read_only_fields = fields


class UserProfileSerializer(serializers.ModelSerializer):
    """
    Full profile of the authenticated user.

    Excludes password and account internals.
    """

    emailVerified = serializers.BooleanField(source='email_verified', read_only=True)
    graduationYear = serializers.IntegerField(source='graduation_year', read_only=True)
    dormLocation = serializers.CharField(source='dorm_location', read_only=True)
    phoneNumber = serializers.CharField(source='phone_number', read_only=True)
    profileImage = serializers.CharField(source='profile_image', read_only=True)
    reputationScore = serializers.FloatField(source='reputation_score', read_only=True)
    totalTrades = serializers.IntegerField(source='total_trades', read_only=True)
    university = UniversitySerializer(read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    lastActive = serializers.DateTimeField(source='last_active', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'emailVerified',
            'major',
            'graduationYear',
            'dormLocation',
            'phoneNumber',
            'profileImage',
            'reputationScore',
            'totalTrades',
            'university',
            'createdAt',
            'updatedAt',
            'lastActive',
        ]
        read_only_fields = fields


class PublicUserSerializer(serializers.ModelSerializer):
    """Profile visible to anyone. No email or contact fields."""

    graduationYear = serializers.IntegerField(source='graduation_year', read_only=True)
    profileImage = serializers.CharField(source='profile_image', read_only=True)
    reputationScore = serializers.FloatField(source='reputation_score', read_only=True)
    totalTrades = serializers.IntegerField(source='total_trades', read_only=True)
    university = UniversitySummarySerializer(read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'name',
            'major',
            'graduationYear',
            'profileImage',
            'reputationScore',
            'totalTrades',
            'university',
            'createdAt',
        ]
        read_only_fields = fields


class UserRegistrationSerializer(serializers.Serializer):
    """
    Serializer for user registration.

    Fields:
    - email: Required, unique, valid email format, at most 150 characters
    - password: Required, at least 8 characters
    - name: Required display name
    - universityId: Required, an active university
    - major, graduationYear, dormLocation, phoneNumber: Optional profile fields
    """

    email = serializers.EmailField(max_length=150)
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        max_length=128,
        trim_whitespace=False,
        style={'input_type': 'password'}
    )
    name = serializers.CharField(min_length=1, max_length=150)
    universityId = serializers.UUIDField(write_only=True)
    major = serializers.CharField(required=False, allow_blank=True, max_length=100)
    graduationYear = serializers.IntegerField(required=False, min_value=1900, max_value=2100)
    dormLocation = serializers.CharField(required=False, allow_blank=True, max_length=200)
    phoneNumber = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=20,
        validators=[validate_phone_number]
    )

    def validate_email(self, value):
        """
        Normalize the email and reject addresses that are already registered.

        Raises:
            Conflict: If the email is taken (returns 409)
        """
        value = value.strip().lower()

        if User.objects.filter(email__iexact=value).exists():
            raise Conflict('User with this email already exists')

        return value

    def validate_password(self, value):
        """
        Validate password strength using Django's password validators.
        """
        try:
            validate_password(value)
        except DjangoValidationError as e:
            raise serializers.ValidationError(list(e.messages))

        return value

    def validate(self, attrs):
        """
        Resolve the university and check the email belongs to it.

        Raises:
            NotFound: If the university does not exist or is inactive
        """
        university = University.objects.filter(pk=attrs['universityId'], is_active=True).first()
        if university is None:
            raise NotFound('University not found.')

        enforce_domain = settings.MARKETPLACE['ENFORCE_UNIVERSITY_EMAIL_DOMAIN']
        if enforce_domain and not university.matches_email(attrs['email']):
            raise serializers.ValidationError({
                'email': [f'Email must belong to the {university.domain} domain.']
            })

        attrs['university'] = university
        return attrs

    def create(self, validated_data):
        """
        Create the user and its credentials account in one transaction.
        """
        return User.objects.create_credentials_user(
            email=validated_data['email'],
            password=validated_data['password'],
            name=validated_data['name'],
            university=validated_data['university'],
            major=validated_data.get('major', ''),
            graduation_year=validated_data.get('graduationYear'),
            dorm_location=validated_data.get('dormLocation', ''),
            phone_number=validated_data.get('phoneNumber', ''),
        )


class LoginSerializer(serializers.Serializer):
    """
    Serializer for user login with email and password.

    Minimal validation to prevent user enumeration attacks.
    Actual authentication happens in the view.
    """

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        trim_whitespace=False,
        style={'input_type': 'password'}
    )


class UserProfileUpdateSerializer(RejectUnknownFieldsMixin, serializers.Serializer):
    """
    Partial profile update.

    Only name, major, graduationYear, dormLocation, phoneNumber and
    profileImage can change. Any other key fails validation, so email,
    reputationScore and totalTrades are out of reach of this endpoint.
    """

    name = serializers.CharField(required=False, min_length=1, max_length=150)
    major = serializers.CharField(required=False, allow_blank=True, max_length=100)
    graduationYear = serializers.IntegerField(
        source='graduation_year',
        required=False,
        allow_null=True,
        min_value=1900,
        max_value=2100
    )
    dormLocation = serializers.CharField(
        source='dorm_location',
        required=False,
        allow_blank=True,
        max_length=200
    )
    phoneNumber = serializers.CharField(
        source='phone_number',
        required=False,
        allow_blank=True,
        max_length=20,
        validators=[validate_phone_number]
    )
    profileImage = serializers.URLField(
        source='profile_image',
        required=False,
        allow_blank=True,
        max_length=500
    )

    def update(self, instance, validated_data):
        return instance.update_profile(**validated_data)


class UserLookupSerializer(serializers.Serializer):
    userId = serializers.UUIDField()


# ============================================================================
# Items
# ============================================================================

class ItemOwnerSerializer(serializers.ModelSerializer):
    reputationScore = serializers.FloatField(source='reputation_score', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'reputationScore']
        read_only_fields = fields


class ItemSerializer(serializers.ModelSerializer):
    """Item listing as returned to clients."""

    imageUrls = serializers.ListField(source='image_urls', child=serializers.CharField(), read_only=True)
    estimatedValue = serializers.DecimalField(
        source='estimated_value',
        max_digits=10,
        decimal_places=2,
        read_only=True
    )
    lookingFor = serializers.CharField(source='looking_for', read_only=True)
    openToOffers = serializers.BooleanField(source='open_to_offers', read_only=True)
    owner = ItemOwnerSerializer(read_only=True)
    universityId = serializers.UUIDField(source='university_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Item
        fields = [
            'id',
            'title',
            'description',
            'category',
            'condition',
            'imageUrls',
            'estimatedValue',
            'location',
            'lookingFor',
            'openToOffers',
            'status',
            'owner',
            'universityId',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields


class ItemWriteSerializer(RejectUnknownFieldsMixin, serializers.Serializer):
    """
    Create or edit an item listing.

    Owner, university and status are never taken from the payload.
    """

    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    category = serializers.ChoiceField(choices=Item.CATEGORY_CHOICES)
    condition = serializers.ChoiceField(choices=Item.CONDITION_CHOICES)
    imageUrls = serializers.ListField(
        source='image_urls',
        child=serializers.URLField(max_length=500),
        required=False
    )
    estimatedValue = serializers.DecimalField(
        source='estimated_value',
        max_digits=10,
        decimal_places=2,
        min_value=0,
        required=False,
        allow_null=True
    )
    location = serializers.CharField(required=False, allow_blank=True, max_length=200)
    lookingFor = serializers.CharField(
        source='looking_for',
        required=False,
        allow_blank=True,
        max_length=500
    )
    openToOffers = serializers.BooleanField(source='open_to_offers', required=False)

    def validate_imageUrls(self, value):
        max_images = settings.MARKETPLACE['MAX_ITEM_IMAGES']
        if len(value) > max_images:
            raise serializers.ValidationError(f'An item can have at most {max_images} images.')
        return value

    def create(self, validated_data):
        owner = self.context['request'].user
        if owner.university_id is None:
            raise serializers.ValidationError(
                'Only users who belong to a university can list items.'
            )
        return Item.objects.create(
            owner=owner,
            university_id=owner.university_id,
            **validated_data
        )

    def update(self, instance, validated_data):
        """
        Edit an available listing.

        Raises:
            Conflict: If the item is reserved, traded or removed
        """
        if instance.status != Item.AVAILABLE:
            raise Conflict(f'Only available items can be edited. This item is {instance.status}.')

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance


class ItemUpdateSerializer(ItemWriteSerializer):
    itemId = serializers.UUIDField(write_only=True)

    def update(self, instance, validated_data):
        validated_data.pop('itemId', None)
        return super().update(instance, validated_data)


class ItemLookupSerializer(serializers.Serializer):
    itemId = serializers.UUIDField()


class ItemListQuerySerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=Item.CATEGORY_CHOICES, required=False)
    condition = serializers.ChoiceField(choices=Item.CONDITION_CHOICES, required=False)
    universityId = serializers.UUIDField(required=False)
    search = serializers.CharField(required=False, max_length=100)


# ============================================================================
# Trades
# ============================================================================

class TradeSerializer(serializers.ModelSerializer):
    """Trade as returned to its parties."""

    senderId = serializers.UUIDField(source='sender_id', read_only=True)
    receiverId = serializers.UUIDField(source='receiver_id', read_only=True)
    senderItemIds = serializers.PrimaryKeyRelatedField(
        source='sender_items',
        many=True,
        read_only=True,
        pk_field=serializers.UUIDField(format='hex_verbose')
    )
    receiverItemIds = serializers.PrimaryKeyRelatedField(
        source='receiver_items',
        many=True,
        read_only=True,
        pk_field=serializers.UUIDField(format='hex_verbose')
    )
    meetingLocation = serializers.CharField(source='meeting_location', read_only=True)
    meetingTime = serializers.DateTimeField(source='meeting_time', read_only=True)
    senderConfirmed = serializers.BooleanField(source='sender_confirmed', read_only=True)
    receiverConfirmed = serializers.BooleanField(source='receiver_confirmed', read_only=True)
    completedAt = serializers.DateTimeField(source='completed_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Trade
        fields = [
            'id',
            'senderId',
            'receiverId',
            'senderItemIds',
            'receiverItemIds',
            'status',
            'message',
            'meetingLocation',
            'meetingTime',
            'senderConfirmed',
            'receiverConfirmed',
            'completedAt',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields


class TradeProposalSerializer(serializers.Serializer):
    """
    Input for proposing a trade.

    Ownership and availability of the items are checked when the trade is
    created, inside the same transaction.
    """

    receiverId = serializers.UUIDField()
    senderItemIds = serializers.ListField(child=serializers.UUIDField(), default=list)
    receiverItemIds = serializers.ListField(child=serializers.UUIDField(), default=list)
    message = serializers.CharField(required=False, allow_blank=True, max_length=1000)
    meetingLocation = serializers.CharField(required=False, allow_blank=True, max_length=200)
    meetingTime = serializers.DateTimeField(required=False, allow_null=True)

    def validate(self, attrs):
        sender_ids = attrs['senderItemIds']
        receiver_ids = attrs['receiverItemIds']

        if not sender_ids and not receiver_ids:
            raise serializers.ValidationError('A trade must include at least one item.')

        if len(set(sender_ids)) != len(sender_ids):
            raise serializers.ValidationError({'senderItemIds': ['Item ids must be unique.']})

        if len(set(receiver_ids)) != len(receiver_ids):
            raise serializers.ValidationError({'receiverItemIds': ['Item ids must be unique.']})

        return attrs


class TradeActionSerializer(serializers.Serializer):
    tradeId = serializers.UUIDField()


# ============================================================================
# Messages
# ============================================================================

class MessageSerializer(serializers.ModelSerializer):
    senderId = serializers.UUIDField(source='sender_id', read_only=True)
    receiverId = serializers.UUIDField(source='receiver_id', read_only=True)
    itemId = serializers.UUIDField(source='item_id', read_only=True, allow_null=True)
    tradeId = serializers.UUIDField(source='trade_id', read_only=True, allow_null=True)
    isRead = serializers.BooleanField(source='is_read', read_only=True)
    readAt = serializers.DateTimeField(source='read_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Message
        fields = [
            'id',
            'senderId',
            'receiverId',
            'content',
            'itemId',
            'tradeId',
            'isRead',
            'readAt',
            'createdAt',
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """
    Input for sending a message.

    A message may reference an item or a trade as its context, not both.
    """

    receiverId = serializers.UUIDField()
    content = serializers.CharField(max_length=2000)
    itemId = serializers.UUIDField(required=False, allow_null=True)
    tradeId = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        request = self.context['request']
        sender = request.user

        if attrs.get('itemId') and attrs.get('tradeId'):
            raise serializers.ValidationError('A message can reference an item or a trade, not both.')

        receiver = User.objects.filter(pk=attrs['receiverId'], is_active=True).first()
        if receiver is None:
            raise NotFound('Receiver not found.')
        if receiver.pk == sender.pk:
            raise serializers.ValidationError({'receiverId': ['You cannot message yourself.']})
        attrs['receiver'] = receiver

        attrs['item'] = None
        if attrs.get('itemId'):
            item = Item.objects.filter(pk=attrs['itemId']).exclude(status=Item.REMOVED).first()
            if item is None:
                raise NotFound('Item not found.')
            attrs['item'] = item

        attrs['trade'] = None
        if attrs.get('tradeId'):
            trade = Trade.objects.filter(pk=attrs['tradeId']).first()
            if trade is None:
                raise NotFound('Trade not found.')
            if not trade.is_party(sender) or not trade.is_party(receiver):
                raise PermissionDenied('Trade messages can only be exchanged between its parties.')
            attrs['trade'] = trade

        return attrs

    def create(self, validated_data):
        message = Message(
            sender=self.context['request'].user,
            receiver=validated_data['receiver'],
            content=validated_data['content'],
            item=validated_data['item'],
            trade=validated_data['trade'],
        )
        message.save()
        return message


class MessageLookupSerializer(serializers.Serializer):
    messageId = serializers.UUIDField()


class InboxQuerySerializer(serializers.Serializer):
    unread = serializers.BooleanField(required=False, default=False)


# ============================================================================
# Reviews
# ============================================================================

class ReviewSerializer(serializers.ModelSerializer):
    tradeId = serializers.UUIDField(source='trade_id', read_only=True)
    reviewerId = serializers.UUIDField(source='reviewer_id', read_only=True)
    revieweeId = serializers.UUIDField(source='reviewee_id', read_only=True)
    reviewerName = serializers.CharField(source='reviewer.name', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Review
        fields = [
            'id',
            'tradeId',
            'reviewerId',
            'reviewerName',
            'revieweeId',
            'rating',
            'comment',
            'createdAt',
        ]
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    """
    Serializer for creating reviews.

    Fields:
    - tradeId: Required, ID of a completed trade
    - rating: Required, integer from 1-5
    - comment: Optional text feedback

    The reviewer is the authenticated user; the reviewee is the other party.
    """

    tradeId = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, max_length=1000)

    def validate(self, attrs):
        """
        Validate trade status, participation and duplicates.

        Raises:
            NotFound: If the trade doesn't exist (404)
            PermissionDenied: If the user was not a party (403)
            Conflict: If the user already reviewed this trade (409)
        """
        user = self.context['request'].user

        try:
            trade = Trade.objects.get(pk=attrs['tradeId'])
        except Trade.DoesNotExist:
            raise NotFound('Trade not found.')

        if not trade.is_party(user):
            raise PermissionDenied('You can only review trades you participated in.')

        if trade.status != Trade.COMPLETED:
            raise serializers.ValidationError({
                'tradeId': [f'Only completed trades can be reviewed. This trade is {trade.status}.']
            })

        if Review.objects.filter(trade=trade, reviewer=user).exists():
            raise Conflict('You have already reviewed this trade.')

        attrs['trade'] = trade
        attrs['reviewer'] = user
        attrs['reviewee_id'] = trade.other_party_id(user)
        return attrs

    def create(self, validated_data):
        review = Review(
            trade=validated_data['trade'],
            reviewer=validated_data['reviewer'],
            reviewee_id=validated_data['reviewee_id'],
            rating=validated_data['rating'],
            comment=validated_data.get('comment', ''),
        )
        review.save()
        return review


# ============================================================================
# Reports
# ============================================================================

class ReportSerializer(serializers.ModelSerializer):
    reporterId = serializers.UUIDField(source='reporter_id', read_only=True)
    itemId = serializers.UUIDField(source='item_id', read_only=True, allow_null=True)
    reportedUserId = serializers.UUIDField(source='reported_user_id', read_only=True, allow_null=True)
    resolvedById = serializers.UUIDField(source='resolved_by_id', read_only=True, allow_null=True)
    resolutionNote = serializers.CharField(source='resolution_note', read_only=True)
    resolvedAt = serializers.DateTimeField(source='resolved_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Report
        fields = [
            'id',
            'reporterId',
            'itemId',
            'reportedUserId',
            'reason',
            'description',
            'status',
            'resolvedById',
            'resolutionNote',
            'resolvedAt',
            'createdAt',
        ]
        read_only_fields = fields


class ReportCreateSerializer(serializers.Serializer):
    reason = serializers.ChoiceField(choices=Report.REASON_CHOICES)
    description = serializers.CharField(required=False, allow_blank=True, max_length=2000)
    itemId = serializers.UUIDField(required=False, allow_null=True)
    reportedUserId = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        reporter = self.context['request'].user

        if not attrs.get('itemId') and not attrs.get('reportedUserId'):
            raise serializers.ValidationError('A report must target an item or a user.')

        attrs['item'] = None
        if attrs.get('itemId'):
            attrs['item'] = Item.objects.filter(pk=attrs['itemId']).first()
            if attrs['item'] is None:
                raise NotFound('Item not found.')

        attrs['reported_user'] = None
        if attrs.get('reportedUserId'):
            if attrs['reportedUserId'] == reporter.pk:
                raise serializers.ValidationError({'reportedUserId': ['You cannot report yourself.']})
            attrs['reported_user'] = User.objects.filter(pk=attrs['reportedUserId']).first()
            if attrs['reported_user'] is None:
                raise NotFound('User not found.')

        return attrs

    def create(self, validated_data):
        return Report.objects.create(
            reporter=self.context['request'].user,
            reason=validated_data['reason'],
            description=validated_data.get('description', ''),
            item=validated_data['item'],
            reported_user=validated_data['reported_user'],
        )


class ReportResolveSerializer(serializers.Serializer):
    reportId = serializers.UUIDField()
    status = serializers.ChoiceField(
        choices=[Report.INVESTIGATING, Report.RESOLVED, Report.DISMISSED]
    )
    resolutionNote = serializers.CharField(required=False, allow_blank=True, max_length=2000)


class ReportListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Report.STATUS_CHOICES, required=False)
