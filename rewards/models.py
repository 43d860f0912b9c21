from django.db import models

from menu.models import MenuItem
from api_responses import to_money, iso

REWARD_TYPE_CHOICES = [
    ('discount', 'Discount'),
    ('free_item', 'Free item'),
    ('upgrade', 'Upgrade'),
]

TRANSACTION_TYPE_CHOICES = [
    ('earn', 'Earn'),
    ('redeem', 'Redeem'),
]


class Reward(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    points_cost = models.IntegerField()
    reward_type = models.CharField(max_length=16, choices=REWARD_TYPE_CHOICES)
    reward_value = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    menu_item = models.ForeignKey(MenuItem, on_delete=models.SET_NULL, null=True, blank=True,
                                  related_name='rewards')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'rewards'

    def __str__(self):
        return f"{self.title} ({self.points_cost} pts)"

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'points_cost': self.points_cost,
            'reward_type': self.reward_type,
            'reward_value': to_money(self.reward_value),
            'menu_item_id': self.menu_item_id,
            'is_active': self.is_active,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }

    def to_catalogue_entry(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'pointsCost': self.points_cost,
            'rewardType': self.reward_type,
            'rewardValue': to_money(self.reward_value),
        }


# user_id is the caller-supplied x-user-id, not a foreign key to users
class UserRewards(models.Model):
    user_id = models.CharField(max_length=64, unique=True)
    current_points = models.IntegerField(default=0)
    total_earned = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_rewards'

    def __str__(self):
        return f"{self.user_id}: {self.current_points}"


class RewardTransaction(models.Model):
    user_id = models.CharField(max_length=64, db_index=True)
    reward = models.ForeignKey(Reward, on_delete=models.SET_NULL, null=True, blank=True)
    points_used = models.IntegerField()
    transaction_type = models.CharField(max_length=8, choices=TRANSACTION_TYPE_CHOICES)
    description = models.CharField(max_length=255, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'reward_transactions'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'reward_id': self.reward_id,
            'points_used': self.points_used,
            'transaction_type': self.transaction_type,
            'description': self.description,
            'created_at': iso(self.created_at),
        }
