import logging
from decimal import Decimal, InvalidOperation

from django.db import DatabaseError
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .models import Reward, UserRewards, RewardTransaction, REWARD_TYPE_CHOICES
from .points import credit_points
from menu.models import MenuItem
from api_responses import ok, fail, read_json, parse_id, parse_bool, to_money
from token_decorators import require_admin, acting_user_id

logger = logging.getLogger(__name__)

REWARD_TYPES = {value for value, _ in REWARD_TYPE_CHOICES}


def _positive_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and parse_id(value) is not None:
        number = int(value)
    else:
        return None
    # points columns are 32-bit integers
    return number if 0 < number < 2 ** 31 else None


# GET /api/rewards/status
@csrf_exempt
@require_http_methods(['GET'])
def rewards_status(request):
    user_id = acting_user_id(request)

    balance = None
    if user_id is not None:
        balance, created = UserRewards.objects.get_or_create(user_id=user_id)
        if created:
            logger.info('Created rewards balance for user %s', user_id)

    try:
        catalogue = [r.to_catalogue_entry() for r in Reward.objects.filter(is_active=True).order_by('points_cost', 'id')]
    except DatabaseError:
        logger.exception('Failed to load rewards catalogue')
        catalogue = []

    return ok({
        'currentPoints': balance.current_points if balance else 0,
        'totalEarned': balance.total_earned if balance else 0,
        'availableRewards': catalogue,
        'isGuest': user_id is None,
        'userId': user_id or 'guest',
    })


# POST /api/rewards/redeem
@csrf_exempt
@require_http_methods(['POST'])
def redeem_reward(request):
    user_id = acting_user_id(request)
    if user_id is None:
        return fail('User authentication required for reward redemption', 'AUTH_REQUIRED', 401)

    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    reward_id = parse_id(data.get('rewardId'))
    points = _positive_int(data.get('pointsToRedeem'))
    if reward_id is None or points is None:
        return fail('Please provide rewardId and pointsToRedeem', 'VALIDATION_ERROR', 400)

    reward = Reward.objects.filter(id=reward_id, is_active=True).first()
    if reward is None:
        return fail('Reward not found', 'NOT_FOUND', 404)
    if points != reward.points_cost:
        return fail('Points to redeem do not match reward cost', 'POINTS_MISMATCH', 400)

    balance = UserRewards.objects.filter(user_id=user_id).first()
    if balance is None:
        return fail('User rewards not found', 'USER_NOT_FOUND', 404)
    if balance.current_points < points:
        return fail('Insufficient points', 'INSUFFICIENT_POINTS', 400)

    balance.current_points -= points
    balance.save(update_fields=['current_points', 'updated_at'])

    transaction = RewardTransaction.objects.create(
        user_id=user_id,
        reward=reward,
        points_used=points,
        transaction_type='redeem',
        description=f'Redeemed: {reward.title}',
    )
    logger.info('User %s redeemed reward %s for %s points', user_id, reward.id, points)

    return ok({
        'message': 'Reward redeemed successfully',
        'newBalance': balance.current_points,
        'reward': {
            'id': reward.id,
            'title': reward.title,
            'description': reward.description,
            'reward_type': reward.reward_type,
            'reward_value': to_money(reward.reward_value),
        },
        'transaction': transaction.to_dict(),
    })


# POST /api/rewards/earn
@csrf_exempt
@require_http_methods(['POST'])
def earn_points(request):
    user_id = acting_user_id(request)
    if user_id is None:
        return fail('User authentication required', 'AUTH_REQUIRED', 401)

    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    points = _positive_int(data.get('points'))
    if points is None:
        return fail('Please provide valid points amount', 'VALIDATION_ERROR', 400)

    balance, transaction = credit_points(user_id, points, data.get('description') or 'Points earned')
    return ok({
        'message': 'Points earned successfully',
        'pointsEarned': points,
        'newBalance': balance.current_points,
        'totalEarned': balance.total_earned,
        'transaction': transaction.to_dict(),
    })


def _reward_fields(data, partial):
    fields = {}
    if 'title' in data:
        fields['title'] = str(data['title'] or '').strip()
    if 'description' in data:
        fields['description'] = data['description'] or ''
    if 'pointsCost' in data:
        cost = _positive_int(data['pointsCost'])
        if cost is None:
            raise ValueError('pointsCost must be a positive integer')
        fields['points_cost'] = cost
    if 'rewardType' in data:
        if data['rewardType'] not in REWARD_TYPES:
            raise ValueError('rewardType must be discount, free_item or upgrade')
        fields['reward_type'] = data['rewardType']
    if 'rewardValue' in data:
        value = data['rewardValue']
        if value in (None, ''):
            fields['reward_value'] = None
        else:
            try:
                fields['reward_value'] = Decimal(str(value))
            except InvalidOperation:
                raise ValueError('rewardValue must be a number')
    if 'menuItemId' in data:
        raw = data['menuItemId']
        if raw in (None, ''):
            fields['menu_item'] = None
        else:
            item_id = parse_id(raw)
            item = MenuItem.objects.filter(id=item_id).first() if item_id else None
            if item is None:
                raise ValueError('menuItemId does not match a menu item')
            fields['menu_item'] = item
    if 'isActive' in data:
        fields['is_active'] = parse_bool(data['isActive'])

    if not partial and not (fields.get('title') and fields.get('points_cost') and fields.get('reward_type')):
        raise ValueError('Please provide title, pointsCost, and rewardType')
    return fields


def _with_menu_item(reward):
    entry = reward.to_dict()
    item = reward.menu_item
    entry['menu_items'] = None if item is None else {
        'name': item.name,
        'price': to_money(item.price),
        'image': item.image,
    }
    return entry


# GET  /api/rewards
# POST /api/rewards
@csrf_exempt
@require_http_methods(['GET', 'POST'])
def rewards(request):
    if request.method == 'POST':
        return create_reward(request)
    return list_rewards(request)


@require_admin
def list_rewards(request):
    qs = Reward.objects.select_related('menu_item').order_by('points_cost', 'id')
    return ok([_with_menu_item(r) for r in qs])


@require_admin
def create_reward(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    try:
        fields = _reward_fields(data, partial=False)
    except ValueError as e:
        return fail(str(e), 'VALIDATION_ERROR', 400)

    fields.setdefault('is_active', True)
    reward = Reward.objects.create(**fields)
    logger.info('Reward %s created by admin %s', reward.id, request.admin.id)
    return ok(reward.to_dict(), status=201)


# PUT    /api/rewards/<id>
# DELETE /api/rewards/<id>
@csrf_exempt
@require_http_methods(['PUT', 'DELETE'])
def reward_detail(request, reward_id):
    rid = parse_id(reward_id)
    if rid is None:
        return fail('Invalid reward ID format', 'INVALID_ID', 400)
    if request.method == 'DELETE':
        return delete_reward(request, rid)
    return update_reward(request, rid)


@require_admin
def update_reward(request, rid):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    reward = Reward.objects.filter(id=rid).first()
    if reward is None:
        return fail('Reward not found', 'NOT_FOUND', 404)

    try:
        fields = _reward_fields(data, partial=True)
    except ValueError as e:
        return fail(str(e), 'VALIDATION_ERROR', 400)
    if 'title' in fields and not fields['title']:
        return fail('title cannot be empty', 'VALIDATION_ERROR', 400)

    for column, value in fields.items():
        setattr(reward, column, value)
    reward.save()
    return ok(reward.to_dict())


@require_admin
def delete_reward(request, rid):
    deleted, _ = Reward.objects.filter(id=rid).delete()
    if not deleted:
        return fail('Reward not found', 'NOT_FOUND', 404)
    return ok(message='Reward deleted successfully')
