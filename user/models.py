from django.db import models
from django.contrib.auth.hashers import make_password, check_password, identify_hasher


# usertype: 0 = admin, 1 = customer
class User(models.Model):
    username = models.CharField(max_length=255)
    usertype = models.IntegerField(default=1)
    email = models.EmailField(max_length=255, unique=True)
    password = models.CharField(max_length=255)
    full_name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        # anything that is not already an encoded hash is hashed here
        try:
            identify_hasher(self.password)
        except ValueError:
            self.password = make_password(self.password)
        super().save(*args, **kwargs)

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)

    @property
    def is_admin(self):
        return self.usertype == 0

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'fullName': self.full_name,
            'phone': self.phone,
            'address': self.address,
            'isAdmin': self.is_admin,
        }

    class Meta:
        db_table = 'users'

    def __str__(self):
        return self.username
