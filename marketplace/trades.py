"""
Trade lifecycle operations.

Each operation runs inside transaction.atomic() with the trade row locked by
select_for_update(). Item status changes are compare-and-set updates
(ItemQuerySet.transition) whose row counts are checked, so two trades that
share an item cannot both reserve or complete it.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from .exceptions import Conflict
from .models import Item, Trade

User = get_user_model()
logger = logging.getLogger(__name__)


def _lock_trade(trade_id):
    """Fetch a trade with its row locked. Must be called inside a transaction."""
    try:
        return Trade.objects.select_for_update().get(pk=trade_id)
    except Trade.DoesNotExist:
        raise NotFound('Trade not found.')


def _ensure_party(trade, user):
    if not trade.is_party(user):
        logger.warning(
            f"Trade access denied. Trade ID: {trade.pk}, User ID: {user.pk}"
        )
        raise PermissionDenied('You are not a party to this trade.')


def _ensure_receiver(trade, user, action):
    _ensure_party(trade, user)
    if trade.receiver_id != user.pk:
        raise PermissionDenied(f'Only the receiver can {action} this trade.')


def _ensure_transition(trade, new_status):
    is_valid, error_message = trade.can_transition_to(new_status)
    if not is_valid:
        raise Conflict(error_message)


def _owned_available_items(item_ids, owner, field):
    """
    Load items that belong to owner and are AVAILABLE.

    Raises:
        ValidationError: If any id is unknown, owned by someone else or not available
    """
    if not item_ids:
        return []

    items = list(Item.objects.filter(pk__in=item_ids))
    found = {item.pk for item in items}
    missing = [str(item_id) for item_id in item_ids if item_id not in found]
    if missing:
        raise ValidationError({field: [f'Items not found: {", ".join(missing)}']})

    for item in items:
        if item.owner_id != owner.pk:
            raise ValidationError({field: [f'Item {item.pk} is not owned by {owner.name or owner.pk}.']})
        if not item.is_available():
            raise ValidationError({field: [f'Item {item.pk} is not available for trade.']})

    return items


def propose_trade(sender, receiver_id, sender_item_ids, receiver_item_ids,
                  message='', meeting_location='', meeting_time=None):
    """
    Create a PENDING trade from sender to the receiver.

    Every sender item must be owned by the sender and every receiver item by
    the receiver, all of them AVAILABLE.

    Raises:
        NotFound: If the receiver does not exist
        ValidationError: If the parties or the item sets are invalid
    """
    receiver = User.objects.filter(pk=receiver_id, is_active=True).first()
    if receiver is None:
        raise NotFound('Receiver not found.')

    if receiver.pk == sender.pk:
        raise ValidationError({'receiverId': ['You cannot trade with yourself.']})

    with transaction.atomic():
        sender_items = _owned_available_items(sender_item_ids, sender, 'senderItemIds')
        receiver_items = _owned_available_items(receiver_item_ids, receiver, 'receiverItemIds')

        trade = Trade(
            sender=sender,
            receiver=receiver,
            message=message,
            meeting_location=meeting_location,
            meeting_time=meeting_time,
        )
        trade.save()
        trade.sender_items.set(sender_items)
        trade.receiver_items.set(receiver_items)

    logger.info(
        f"Trade proposed. Trade ID: {trade.pk}, "
        f"Sender ID: {sender.pk}, Receiver ID: {receiver.pk}, "
        f"Items: {len(sender_items)} for {len(receiver_items)}"
    )
    return trade


def accept_trade(user, trade_id):
    """
    Accept a PENDING trade and reserve its items.

    Raises:
        Conflict: If the trade is not PENDING or an item is no longer AVAILABLE
    """
    with transaction.atomic():
        trade = _lock_trade(trade_id)
        _ensure_receiver(trade, user, 'accept')
        _ensure_transition(trade, Trade.ACCEPTED)

        item_ids = trade.involved_item_ids()
        reserved = Item.objects.transition(item_ids, Item.AVAILABLE, Item.PENDING_TRADE)
        if reserved != len(item_ids):
            logger.warning(
                f"Trade accept lost item reservation. Trade ID: {trade.pk}, "
                f"Reserved: {reserved}/{len(item_ids)}"
            )
            raise Conflict('One or more items in this trade are no longer available.')

        trade.status = Trade.ACCEPTED
        trade.save()

    logger.info(f"Trade accepted. Trade ID: {trade.pk}, Receiver ID: {user.pk}")
    return trade


def decline_trade(user, trade_id):
    """Decline a PENDING trade. Items are untouched."""
    with transaction.atomic():
        trade = _lock_trade(trade_id)
        _ensure_receiver(trade, user, 'decline')
        _ensure_transition(trade, Trade.DECLINED)

        trade.status = Trade.DECLINED
        trade.save()

    logger.info(f"Trade declined. Trade ID: {trade.pk}, Receiver ID: {user.pk}")
    return trade


def confirm_trade(user, trade_id):
    """
    Record the caller's confirmation of an ACCEPTED trade.

    When both parties have confirmed, the trade completes: its items move
    PENDING_TRADE -> TRADED, completed_at is stamped and both parties'
    total_trades go up by one.

    Raises:
        Conflict: If the trade is not ACCEPTED, the caller already confirmed,
            or an item was not reserved for this trade any more
    """
    with transaction.atomic():
        trade = _lock_trade(trade_id)
        _ensure_party(trade, user)

        if trade.status != Trade.ACCEPTED:
            if trade.status == Trade.PENDING:
                raise Conflict('Cannot confirm a pending trade. It must be accepted first.')
            raise Conflict(f'Cannot modify a {trade.status.lower()} trade.')

        if user.pk == trade.sender_id:
            if trade.sender_confirmed:
                raise Conflict('You have already confirmed this trade.')
            trade.sender_confirmed = True
        else:
            if trade.receiver_confirmed:
                raise Conflict('You have already confirmed this trade.')
            trade.receiver_confirmed = True

        if trade.sender_confirmed and trade.receiver_confirmed:
            _ensure_transition(trade, Trade.COMPLETED)

            item_ids = trade.involved_item_ids()
            traded = Item.objects.transition(item_ids, Item.PENDING_TRADE, Item.TRADED)
            if traded != len(item_ids):
                logger.warning(
                    f"Trade completion lost item race. Trade ID: {trade.pk}, "
                    f"Traded: {traded}/{len(item_ids)}"
                )
                raise Conflict('One or more items in this trade have already been traded.')

            trade.status = Trade.COMPLETED
            trade.completed_at = timezone.now()
            User.objects.filter(pk__in=[trade.sender_id, trade.receiver_id]).update(
                total_trades=F('total_trades') + 1
            )

        trade.save()

    if trade.status == Trade.COMPLETED:
        logger.info(f"Trade completed. Trade ID: {trade.pk}")
    else:
        logger.info(f"Trade confirmed. Trade ID: {trade.pk}, User ID: {user.pk}")
    return trade


def cancel_trade(user, trade_id):
    """
    Cancel a PENDING or ACCEPTED trade.

    Items reserved by an ACCEPTED trade are released back to AVAILABLE.
    """
    with transaction.atomic():
        trade = _lock_trade(trade_id)
        _ensure_party(trade, user)
        _ensure_transition(trade, Trade.CANCELLED)

        if trade.status == Trade.ACCEPTED:
            Item.objects.transition(trade.involved_item_ids(), Item.PENDING_TRADE, Item.AVAILABLE)

        old_status = trade.status
        trade.status = Trade.CANCELLED
        trade.save()

    logger.info(
        f"Trade cancelled. Trade ID: {trade.pk}, "
        f"Old Status: {old_status}, User ID: {user.pk}"
    )
    return trade


def get_trade_for(user, trade_id):
    """Return a trade the user is a party to."""
    try:
        trade = Trade.objects.prefetch_related('sender_items', 'receiver_items').get(pk=trade_id)
    except Trade.DoesNotExist:
        raise NotFound('Trade not found.')

    _ensure_party(trade, user)
    return trade
