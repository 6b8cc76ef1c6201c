"""
Django signals for automatic reputation recalculation.

A user's reputation_score is the mean rating of the reviews they received,
rounded to two decimals. It is recomputed whenever a review is saved.
"""

import logging

from django.db import transaction
from django.db.models import Avg
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Review, User

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Review)
def update_reputation_on_review_save(sender, instance, created, **kwargs):
    """
    Recompute the reviewee's reputation when a review is created or updated.

    The reviewee row is locked while the average is computed and written.
    This runs inside the transaction of Review.save(); if it fails the review
    is rolled back with it, so reviews and reputation never drift apart.

    Args:
        sender: The Review model class
        instance: The Review instance that was saved
        created: Boolean indicating if this is a new review
        **kwargs: Additional keyword arguments
    """
    try:
        with transaction.atomic():
            user = User.objects.select_for_update().get(pk=instance.reviewee_id)

            avg_rating = Review.objects.filter(reviewee=user).aggregate(avg=Avg('rating'))['avg']

            if avg_rating is not None:
                user.reputation_score = round(float(avg_rating), 2)
                user.save(update_fields=['reputation_score'])

            action = "created" if created else "updated"
            logger.info(
                f"Updated reputation for review {instance.id} ({action}): "
                f"reviewee={user.email}, rating={instance.rating}, "
                f"reputation={user.reputation_score}"
            )

    except Exception as e:
        logger.error(
            f"Error updating reputation for review {instance.id}: {e}",
            exc_info=True
        )
        # Re-raise so the review write is rolled back too
        raise
