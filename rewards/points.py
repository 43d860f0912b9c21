import logging
import math
from decimal import Decimal

from django.conf import settings
from django.db import DatabaseError

from .models import UserRewards, RewardTransaction

logger = logging.getLogger(__name__)


def points_for_total(total) -> int:
    """One point per whole POINTS_PER_DOLLAR_DIVISOR spent."""
    divisor = Decimal(settings.POINTS_PER_DOLLAR_DIVISOR)
    return int(math.floor(Decimal(total) / divisor))


def credit_points(user_id, points, description):
    balance, _ = UserRewards.objects.get_or_create(user_id=str(user_id))
    balance.current_points += points
    balance.total_earned += points
    balance.save(update_fields=['current_points', 'total_earned', 'updated_at'])

    transaction = RewardTransaction.objects.create(
        user_id=str(user_id),
        points_used=points,
        transaction_type='earn',
        description=description,
    )
    return balance, transaction


def award_order_points(user_id, total, order_number):
    """
    Credit points for a placed order. The order is already written, so
    a failure here is logged and the caller gets None instead of an error.
    """
    if not user_id:
        return None
    points = points_for_total(total)
    if points <= 0:
        return None
    try:
        balance, _ = credit_points(user_id, points, f'Earned from order {order_number}')
    except DatabaseError:
        logger.exception('Failed to award %s points to user %s for order %s', points, user_id, order_number)
        return None

    logger.info('Awarded %s points to user %s for order %s', points, user_id, order_number)
    return {
        'pointsEarned': points,
        'newBalance': balance.current_points,
        'totalEarned': balance.total_earned,
    }
