from django.db import models

from api_responses import to_money, iso


# Display metadata for the menu's category strings. Items reference a
# category by name, there is no foreign key between the two tables.
class Category(models.Model):
    name = models.CharField(max_length=100, unique=True)
    display_name = models.CharField(max_length=255)
    icon = models.CharField(max_length=32, default='📁')
    background_color = models.CharField(max_length=32, default='#FFE5E5')
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'categories'
        ordering = ['sort_order', 'id']

    def __str__(self):
        return self.display_name

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'display_name': self.display_name,
            'icon': self.icon,
            'background_color': self.background_color,
            'sort_order': self.sort_order,
            'is_active': self.is_active,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }


class MenuItem(models.Model):
    name = models.CharField(max_length=100)
    description = models.TextField(max_length=500)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    discount_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    category = models.CharField(max_length=100, db_index=True)
    ingredients = models.JSONField(default=list, blank=True)
    portion_size = models.CharField(max_length=100, blank=True, default='')
    available = models.BooleanField(default=True)
    # embedded data URL, or a blob URL when images are uploaded to azure
    image = models.TextField(blank=True, default='')
    is_featured = models.BooleanField(default=False)
    featured_order = models.IntegerField(default=0)

    is_announcement = models.BooleanField(default=False)
    announcement_title = models.CharField(max_length=255, blank=True, null=True)
    announcement_subtitle = models.CharField(max_length=255, blank=True, null=True)
    announcement_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    announcement_priority = models.IntegerField(default=999)
    announcement_active = models.BooleanField(default=True)
    announcement_image = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'menu_items'
        indexes = [models.Index(fields=['category', 'available'])]

    def __str__(self):
        return self.name

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'price': to_money(self.price),
            'discount_price': to_money(self.discount_price),
            'category': self.category,
            'ingredients': self.ingredients or [],
            'portion_size': self.portion_size,
            'available': self.available,
            'image': self.image,
            'is_featured': self.is_featured,
            'featured_order': self.featured_order,
            'is_announcement': self.is_announcement,
            'announcement_title': self.announcement_title,
            'announcement_subtitle': self.announcement_subtitle,
            'announcement_price': to_money(self.announcement_price),
            'announcement_priority': self.announcement_priority,
            'announcement_active': self.announcement_active,
            'announcement_image': self.announcement_image,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
