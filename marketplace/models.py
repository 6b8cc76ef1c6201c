"""
Domain models for the Campus Trade marketplace.
"""

import uuid

from django.contrib.auth.hashers import check_password, make_password
from django.contrib.auth.models import AbstractUser, UserManager as DjangoUserManager
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models, transaction
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from .validators import normalize_domain, validate_image_urls, validate_phone_number


# ============================================================================
# University
# ============================================================================

class University(models.Model):
    """
    University whose students trade with each other.

    Fields:
    - name: Display name of the institution
    - domain: Email domain students register with (e.g. 'uni.edu')
    - location: City / campus description
    - is_active: Inactive universities cannot accept new registrations
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(
        _('name'),
        max_length=200,
        help_text=_('Name of the university')
    )

    domain = models.CharField(
        _('email domain'),
        max_length=255,
        unique=True,
        error_messages={
            'unique': _('A university with that email domain already exists.'),
        },
        help_text=_('Email domain used by students, e.g. uni.edu')
    )

    location = models.CharField(
        _('location'),
        max_length=255,
        blank=True,
        default=''
    )

    is_active = models.BooleanField(_('active'), default=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('university')
        verbose_name_plural = _('universities')
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.domain = normalize_domain(self.domain)
        super().save(*args, **kwargs)

    def matches_email(self, email):
        """
        Check whether an email address belongs to this university.

        Subdomains count as a match, so 'cs.uni.edu' matches 'uni.edu'.
        """
        email_domain = normalize_domain(email.rsplit('@', 1)[-1])
        return email_domain == self.domain or email_domain.endswith('.' + self.domain)


# ============================================================================
# User & Account
# ============================================================================

class UserManager(DjangoUserManager):
    """User manager that knows how to create credentials-backed users."""

    def create_credentials_user(self, email, password, name, university, **extra_fields):
        """
        Create a user together with its credentials account.

        The password hash is stored on the Account only; the User row carries
        an unusable password. Both rows are written in one transaction.
        """
        email = self.normalize_email(email).strip().lower()
        with transaction.atomic(using=self.db):
            user = self.model(
                username=email,
                email=email,
                name=name,
                university=university,
                **extra_fields
            )
            user.set_unusable_password()
            user.save(using=self._db)

            account = Account(
                user=user,
                provider_id=Account.CREDENTIALS,
                account_id=str(user.pk),
            )
            account.set_password(password)
            account.save(using=self._db)

        return user


class User(AbstractUser):
    """
    Marketplace user.

    Additional fields:
    - email: Required, unique, stored lowercase
    - name: Display name
    - email_verified: Whether the university email has been verified
    - university: The university the user belongs to
    - major, graduation_year, dorm_location, phone_number, profile_image: Profile fields
    - reputation_score: Trust metric, maintained from received reviews
    - total_trades: Number of completed trades
    - created_at / updated_at / last_active: Timestamps
    """

    # Fields a user may change about themselves through the profile endpoint.
    PROFILE_FIELDS = (
        'name',
        'major',
        'graduation_year',
        'dorm_location',
        'phone_number',
        'profile_image',
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    email = models.EmailField(
        _('email address'),
        unique=True,
        blank=False,
        null=False,
        error_messages={
            'unique': _('A user with that email already exists.'),
        },
        help_text=_('Required. Enter a valid email address.')
    )

    name = models.CharField(
        _('name'),
        max_length=150,
        blank=True,
        default='',
        help_text=_('Display name shown to other students.')
    )

    email_verified = models.BooleanField(
        _('email verified'),
        default=False,
        help_text=_('Indicates whether the university email address has been verified.')
    )

    # Staff accounts created from the command line may not belong to a university.
    university = models.ForeignKey(
        University,
        on_delete=models.PROTECT,
        related_name='users',
        null=True,
        blank=True,
        help_text=_('University the user studies at')
    )

    major = models.CharField(_('major'), max_length=100, blank=True, default='')

    graduation_year = models.PositiveSmallIntegerField(
        _('graduation year'),
        null=True,
        blank=True,
        validators=[
            MinValueValidator(1900, message=_('Graduation year must be 1900 or later.')),
            MaxValueValidator(2100, message=_('Graduation year must be 2100 or earlier.'))
        ]
    )

    dorm_location = models.CharField(_('dorm location'), max_length=200, blank=True, default='')

    phone_number = models.CharField(
        _('phone number'),
        max_length=20,
        blank=True,
        default='',
        validators=[validate_phone_number],
        help_text=_('Optional. Enter phone number in international format.')
    )

    profile_image = models.URLField(
        _('profile image'),
        max_length=500,
        blank=True,
        default='',
        help_text=_('Optional. URL of a profile picture.')
    )

    reputation_score = models.FloatField(
        _('reputation score'),
        default=5.0,
        validators=[
            MinValueValidator(0.0, message=_('Reputation cannot be negative.')),
            MaxValueValidator(5.0, message=_('Reputation cannot exceed 5.0.'))
        ],
        help_text=_('Average rating received from trade partners.')
    )

    total_trades = models.PositiveIntegerField(
        _('total trades'),
        default=0,
        help_text=_('Number of completed trades.')
    )

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)
    last_active = models.DateTimeField(_('last active'), null=True, blank=True)

    objects = UserManager()

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['email'], name='user_email_idx'),
            models.Index(fields=['university'], name='user_university_idx'),
        ]

    def __str__(self):
        return self.email or self.username

    def save(self, *args, **kwargs):
        # Normalize email to lowercase for case-insensitive uniqueness
        if self.email:
            self.email = self.email.strip().lower()
        if not self.username:
            self.username = self.email
        super().save(*args, **kwargs)

    def get_credentials_account(self):
        """Return the credentials Account for this user, or None."""
        return self.accounts.filter(provider_id=Account.CREDENTIALS).first()

    def update_profile(self, **changes):
        """
        Apply a partial profile update.

        Only PROFILE_FIELDS may change; updated_at is always stamped.

        Raises:
            ValueError: If a field outside PROFILE_FIELDS is passed
        """
        disallowed = set(changes) - set(self.PROFILE_FIELDS)
        if disallowed:
            raise ValueError(f'Fields cannot be updated: {", ".join(sorted(disallowed))}')

        for field, value in changes.items():
            setattr(self, field, value)
        self.updated_at = timezone.now()
        self.save(update_fields=list(changes) + ['updated_at'])
        return self

    def touch_last_active(self):
        now = timezone.now()
        User.objects.filter(pk=self.pk).update(last_active=now)
        self.last_active = now


class Account(models.Model):
    """
    Authentication account linked to a user.

    A user registered with email and password has exactly one account whose
    provider_id is 'credentials'; that account holds the password hash.
    """

    CREDENTIALS = 'credentials'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='accounts'
    )

    provider_id = models.CharField(_('provider id'), max_length=50)
    account_id = models.CharField(_('account id'), max_length=255)

    password = models.CharField(
        _('password hash'),
        max_length=255,
        blank=True,
        default=''
    )

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('account')
        verbose_name_plural = _('accounts')
        constraints = [
            models.UniqueConstraint(
                fields=['provider_id', 'account_id'],
                name='unique_account_per_provider'
            ),
            models.UniqueConstraint(
                fields=['user'],
                condition=Q(provider_id='credentials'),
                name='one_credentials_account_per_user'
            ),
        ]

    def __str__(self):
        return f"{self.provider_id} account for {self.user_id}"

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        """
        Verify a plaintext password against the stored hash.

        The stored hash is upgraded in place when the hasher settings change.
        """
        if not self.password:
            return False

        def setter(raw):
            self.set_password(raw)
            self.save(update_fields=['password', 'updated_at'])

        return check_password(raw_password, self.password, setter)


# ============================================================================
# Items
# ============================================================================

class ItemQuerySet(models.QuerySet):

    def transition(self, item_ids, from_status, to_status):
        """
        Atomically move items from one status to another.

        Only rows currently in from_status are touched. Returns the number of
        rows updated so the caller can detect items that changed underneath it.
        """
        return self.filter(pk__in=item_ids, status=from_status).update(
            status=to_status,
            updated_at=timezone.now()
        )


class Item(models.Model):
    """
    Item listed for trade by its owner.

    Status lifecycle:
    - AVAILABLE: listed and tradable
    - PENDING_TRADE: reserved by an accepted trade
    - TRADED: exchanged in a completed trade
    - REMOVED: soft-deleted by the owner
    """

    AVAILABLE = 'AVAILABLE'
    PENDING_TRADE = 'PENDING_TRADE'
    TRADED = 'TRADED'
    REMOVED = 'REMOVED'

    STATUS_CHOICES = [
        (AVAILABLE, 'Available'),
        (PENDING_TRADE, 'Pending trade'),
        (TRADED, 'Traded'),
        (REMOVED, 'Removed'),
    ]

    CATEGORY_CHOICES = [
        ('TEXTBOOKS', 'Textbooks'),
        ('ELECTRONICS', 'Electronics'),
        ('FURNITURE', 'Furniture'),
        ('CLOTHING', 'Clothing'),
        ('KITCHEN', 'Kitchen'),
        ('SPORTS', 'Sports'),
        ('DECOR', 'Decor'),
        ('SUPPLIES', 'School supplies'),
        ('OTHER', 'Other'),
    ]

    CONDITION_CHOICES = [
        ('NEW', 'New'),
        ('LIKE_NEW', 'Like new'),
        ('GOOD', 'Good'),
        ('FAIR', 'Fair'),
        ('POOR', 'Poor'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='items',
        help_text=_('User listing this item')
    )

    university = models.ForeignKey(
        University,
        on_delete=models.PROTECT,
        related_name='items'
    )

    title = models.CharField(_('title'), max_length=200)
    description = models.TextField(_('description'))

    category = models.CharField(_('category'), max_length=20, choices=CATEGORY_CHOICES)
    condition = models.CharField(_('condition'), max_length=20, choices=CONDITION_CHOICES)

    image_urls = models.JSONField(
        _('image URLs'),
        default=list,
        blank=True,
        validators=[validate_image_urls],
        help_text=_('Ordered list of image URLs')
    )

    estimated_value = models.DecimalField(
        _('estimated value'),
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0, message=_('Estimated value cannot be negative.'))]
    )

    location = models.CharField(_('campus location'), max_length=200, blank=True, default='')

    looking_for = models.CharField(
        _('looking for'),
        max_length=500,
        blank=True,
        default='',
        help_text=_('What the owner would like in exchange')
    )

    open_to_offers = models.BooleanField(_('open to offers'), default=True)

    status = models.CharField(
        _('status'),
        max_length=20,
        choices=STATUS_CHOICES,
        default=AVAILABLE
    )

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    objects = ItemQuerySet.as_manager()

    class Meta:
        verbose_name = _('item')
        verbose_name_plural = _('items')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner'], name='item_owner_idx'),
            models.Index(fields=['university', 'status'], name='item_university_status_idx'),
            models.Index(fields=['category'], name='item_category_idx'),
            models.Index(fields=['status'], name='item_status_idx'),
        ]

    def __str__(self):
        return self.title

    def clean(self):
        super().clean()

        if not self.title or not self.title.strip():
            raise ValidationError({'title': _('Title cannot be empty.')})

        if not self.description or not self.description.strip():
            raise ValidationError({'description': _('Description cannot be empty.')})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def is_available(self):
        return self.status == self.AVAILABLE


# ============================================================================
# Trades
# ============================================================================

class Trade(models.Model):
    """
    Trade proposal between two users.

    Valid transitions:
    - PENDING -> ACCEPTED, DECLINED (receiver only)
    - PENDING -> CANCELLED (either party)
    - ACCEPTED -> COMPLETED (once both parties confirmed)
    - ACCEPTED -> CANCELLED (either party)
    - DECLINED, COMPLETED, CANCELLED are terminal
    """

    PENDING = 'PENDING'
    ACCEPTED = 'ACCEPTED'
    DECLINED = 'DECLINED'
    COMPLETED = 'COMPLETED'
    CANCELLED = 'CANCELLED'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (ACCEPTED, 'Accepted'),
        (DECLINED, 'Declined'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    VALID_TRANSITIONS = {
        PENDING: [ACCEPTED, DECLINED, CANCELLED],
        ACCEPTED: [COMPLETED, CANCELLED],
        DECLINED: [],
        COMPLETED: [],
        CANCELLED: [],
    }

    TERMINAL_STATUSES = (DECLINED, COMPLETED, CANCELLED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sender = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='trades_sent',
        help_text=_('User proposing the trade')
    )

    receiver = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='trades_received',
        help_text=_('User receiving the proposal')
    )

    sender_items = models.ManyToManyField(
        Item,
        related_name='offered_in_trades',
        blank=True,
        help_text=_("Sender's items offered in the trade")
    )

    receiver_items = models.ManyToManyField(
        Item,
        related_name='requested_in_trades',
        blank=True,
        help_text=_("Receiver's items requested in the trade")
    )

    status = models.CharField(
        _('status'),
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING
    )

    message = models.TextField(_('message'), blank=True, default='')
    meeting_location = models.CharField(_('meeting location'), max_length=200, blank=True, default='')
    meeting_time = models.DateTimeField(_('meeting time'), null=True, blank=True)

    sender_confirmed = models.BooleanField(_('sender confirmed'), default=False)
    receiver_confirmed = models.BooleanField(_('receiver confirmed'), default=False)

    completed_at = models.DateTimeField(_('completed at'), null=True, blank=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('trade')
        verbose_name_plural = _('trades')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['sender'], name='trade_sender_idx'),
            models.Index(fields=['receiver'], name='trade_receiver_idx'),
            models.Index(fields=['status'], name='trade_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(status='COMPLETED', completed_at__isnull=False)
                    | (~Q(status='COMPLETED') & Q(completed_at__isnull=True))
                ),
                name='trade_completed_at_matches_status'
            ),
            models.CheckConstraint(
                condition=~Q(sender=F('receiver')),
                name='trade_parties_differ'
            ),
        ]

    def __str__(self):
        return f"Trade {self.pk} ({self.status})"

    def clean(self):
        """
        Validate parties, completion invariants and status transitions.

        Raises:
            ValidationError: If validation fails
        """
        super().clean()

        if self.sender_id and self.receiver_id and self.sender_id == self.receiver_id:
            raise ValidationError({
                'receiver': _('You cannot trade with yourself.')
            })

        if self.status == self.COMPLETED:
            if self.completed_at is None:
                raise ValidationError({
                    'completed_at': _('Completed trades must record when they completed.')
                })
            if not (self.sender_confirmed and self.receiver_confirmed):
                raise ValidationError({
                    'status': _('A trade completes only after both parties confirm.')
                })
        elif self.completed_at is not None:
            raise ValidationError({
                'completed_at': _('Only completed trades have a completion time.')
            })

        if not self._state.adding:
            try:
                old_status = Trade.objects.values_list('status', flat=True).get(pk=self.pk)
            except Trade.DoesNotExist:
                old_status = None
            if old_status and old_status != self.status:
                if self.status not in self.VALID_TRANSITIONS.get(old_status, []):
                    raise ValidationError({
                        'status': _(
                            'Invalid trade status transition from %(old)s to %(new)s.'
                        ) % {'old': old_status, 'new': self.status}
                    })

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def can_transition_to(self, new_status):
        """
        Validate if the trade can move to new_status.

        Returns:
            tuple: (is_valid: bool, error_message: str or None)
        """
        current_status = self.status

        if current_status in self.TERMINAL_STATUSES:
            return False, f'Cannot modify a {current_status.lower()} trade.'

        if new_status == self.COMPLETED and current_status == self.PENDING:
            return False, 'Cannot complete a pending trade. It must be accepted first.'

        if new_status not in self.VALID_TRANSITIONS[current_status]:
            return False, f'Invalid trade status transition from {current_status} to {new_status}.'

        return True, None

    def is_party(self, user):
        return user.pk in (self.sender_id, self.receiver_id)

    def other_party_id(self, user):
        return self.receiver_id if user.pk == self.sender_id else self.sender_id

    def involved_item_ids(self):
        sender_ids = self.sender_items.values_list('pk', flat=True)
        receiver_ids = self.receiver_items.values_list('pk', flat=True)
        return list(sender_ids) + list(receiver_ids)


# ============================================================================
# Messages
# ============================================================================

class Message(models.Model):
    """
    Direct message between two users, optionally about an item or a trade.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sender = models.ForeignKey(User, on_delete=models.CASCADE, related_name='messages_sent')
    receiver = models.ForeignKey(User, on_delete=models.CASCADE, related_name='messages_received')

    content = models.TextField(_('content'), max_length=2000)

    item = models.ForeignKey(
        Item,
        on_delete=models.SET_NULL,
        related_name='messages',
        null=True,
        blank=True
    )

    trade = models.ForeignKey(
        Trade,
        on_delete=models.SET_NULL,
        related_name='messages',
        null=True,
        blank=True
    )

    is_read = models.BooleanField(_('read'), default=False)
    read_at = models.DateTimeField(_('read at'), null=True, blank=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name = _('message')
        verbose_name_plural = _('messages')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['sender', 'receiver'], name='message_participants_idx'),
            models.Index(fields=['receiver', 'is_read'], name='message_unread_idx'),
        ]

    def __str__(self):
        return f"Message from {self.sender_id} to {self.receiver_id}"

    def clean(self):
        super().clean()

        if self.sender_id and self.receiver_id and self.sender_id == self.receiver_id:
            raise ValidationError({'receiver': _('You cannot message yourself.')})

        if not self.content or not self.content.strip():
            raise ValidationError({'content': _('Message cannot be empty.')})

        if self.item_id and self.trade_id:
            raise ValidationError(_('A message can reference an item or a trade, not both.'))

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def mark_read(self):
        """Mark the message as read once; later calls keep the first read time."""
        if self.is_read:
            return False
        self.is_read = True
        self.read_at = timezone.now()
        self.save(update_fields=['is_read', 'read_at'])
        return True


# ============================================================================
# Reviews
# ============================================================================

class Review(models.Model):
    """
    Review left by one trade party about the other after a completed trade.

    Fields:
    - reviewer: User giving the review
    - reviewee: The other party of the trade
    - trade: The completed trade being reviewed
    - rating: Integer rating from 1 to 5
    - comment: Optional written feedback
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    trade = models.ForeignKey(Trade, on_delete=models.CASCADE, related_name='reviews')

    reviewer = models.ForeignKey(User, on_delete=models.CASCADE, related_name='reviews_given')
    reviewee = models.ForeignKey(User, on_delete=models.CASCADE, related_name='reviews_received')

    rating = models.PositiveSmallIntegerField(
        _('rating'),
        validators=[
            MinValueValidator(1, message=_('Rating must be at least 1.')),
            MaxValueValidator(5, message=_('Rating must be at most 5.'))
        ]
    )

    comment = models.TextField(_('comment'), blank=True, default='')

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)

    class Meta:
        verbose_name = _('review')
        verbose_name_plural = _('reviews')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['reviewer'], name='review_reviewer_idx'),
            models.Index(fields=['reviewee'], name='review_reviewee_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['trade', 'reviewer'],
                name='one_review_per_trade_party'
            ),
            models.CheckConstraint(
                condition=Q(rating__gte=1) & Q(rating__lte=5),
                name='review_rating_range'
            ),
            models.CheckConstraint(
                condition=~Q(reviewer=F('reviewee')),
                name='review_parties_differ'
            ),
        ]

    def __str__(self):
        return f"Review by {self.reviewer_id} for {self.reviewee_id} - {self.rating}★"

    def clean(self):
        """
        Validate the review against its trade.

        Ensures:
        - Reviewer and reviewee are different users
        - Trade status is COMPLETED
        - Reviewer and reviewee are the two parties of the trade
        """
        super().clean()

        if self.reviewer_id and self.reviewee_id and self.reviewer_id == self.reviewee_id:
            raise ValidationError({
                'reviewee': _('Reviewer and reviewee cannot be the same user.')
            })

        if self.trade_id:
            trade = self.trade
            if trade.status != Trade.COMPLETED:
                raise ValidationError({
                    'trade': _('Only completed trades can be reviewed.')
                })

            parties = {trade.sender_id, trade.receiver_id}
            if self.reviewer_id not in parties:
                raise ValidationError({
                    'reviewer': _('Reviewer must be a party of the trade.')
                })
            if self.reviewee_id not in parties:
                raise ValidationError({
                    'reviewee': _('Reviewee must be the other party of the trade.')
                })

    def save(self, *args, **kwargs):
        # Unique constraints are left to the database so duplicates raise IntegrityError
        if self._state.adding:
            self.full_clean(validate_constraints=False)
        super().save(*args, **kwargs)


# ============================================================================
# Reports
# ============================================================================

class Report(models.Model):
    """
    Abuse report filed against an item or a user, handled by staff.
    """

    PENDING = 'PENDING'
    INVESTIGATING = 'INVESTIGATING'
    RESOLVED = 'RESOLVED'
    DISMISSED = 'DISMISSED'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (INVESTIGATING, 'Investigating'),
        (RESOLVED, 'Resolved'),
        (DISMISSED, 'Dismissed'),
    ]

    VALID_TRANSITIONS = {
        PENDING: [INVESTIGATING, RESOLVED, DISMISSED],
        INVESTIGATING: [RESOLVED, DISMISSED],
        RESOLVED: [],
        DISMISSED: [],
    }

    REASON_CHOICES = [
        ('SPAM', 'Spam'),
        ('SCAM', 'Scam or fraud'),
        ('INAPPROPRIATE', 'Inappropriate content'),
        ('PROHIBITED_ITEM', 'Prohibited item'),
        ('HARASSMENT', 'Harassment'),
        ('OTHER', 'Other'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    reporter = models.ForeignKey(User, on_delete=models.CASCADE, related_name='reports_filed')

    item = models.ForeignKey(
        Item,
        on_delete=models.SET_NULL,
        related_name='reports',
        null=True,
        blank=True
    )

    reported_user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name='reports_received',
        null=True,
        blank=True
    )

    reason = models.CharField(_('reason'), max_length=20, choices=REASON_CHOICES)
    description = models.TextField(_('description'), blank=True, default='')

    status = models.CharField(
        _('status'),
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING
    )

    resolved_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name='reports_resolved',
        null=True,
        blank=True
    )
    resolution_note = models.TextField(_('resolution note'), blank=True, default='')
    resolved_at = models.DateTimeField(_('resolved at'), null=True, blank=True)

    created_at = models.DateTimeField(_('created at'), auto_now_add=True)
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('report')
        verbose_name_plural = _('reports')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='report_status_idx'),
        ]

    def __str__(self):
        return f"Report {self.reason} by {self.reporter_id} ({self.status})"

    def can_transition_to(self, new_status):
        return new_status in self.VALID_TRANSITIONS.get(self.status, [])

    def resolve(self, staff_user, new_status, note=''):
        """
        Move the report along its workflow.

        Terminal statuses record who closed the report and when.

        Raises:
            ValidationError: If the transition is not allowed
        """
        if not self.can_transition_to(new_status):
            raise ValidationError({
                'status': _('Invalid report status transition from %(old)s to %(new)s.') % {
                    'old': self.status,
                    'new': new_status,
                }
            })

        self.status = new_status
        if note:
            self.resolution_note = note
        if new_status in (self.RESOLVED, self.DISMISSED):
            self.resolved_by = staff_user
            self.resolved_at = timezone.now()
        self.save()
        return self
