from django.db import models

from api_responses import iso


class Feedback(models.Model):
    name = models.CharField(max_length=255, default='Anonymous')
    email = models.CharField(max_length=255, blank=True, null=True)
    rating = models.IntegerField()
    category = models.CharField(max_length=64, default='general')
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'feedback'

    def __str__(self):
        return f"{self.name} ({self.rating}/5)"

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'rating': self.rating,
            'category': self.category,
            'message': self.message,
            'created_at': iso(self.created_at),
        }
