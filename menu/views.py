import io
import json
import logging
import re
from decimal import Decimal, InvalidOperation

from django.db import DatabaseError, IntegrityError
from django.db.models import Count
from django.http.multipartparser import MultiPartParser, MultiPartParserError
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .models import MenuItem, Category
from .menu_image_storage import store_image, ImageRejected
from api_responses import ok, fail, read_json, parse_id, parse_bool
from token_decorators import require_admin, has_authorization_header

logger = logging.getLogger(__name__)

# (column, client key); either spelling is accepted on input
TEXT_FIELDS = [
    ('name', 'name'),
    ('description', 'description'),
    ('category', 'category'),
    ('portion_size', 'portionSize'),
    ('announcement_title', 'announcementTitle'),
    ('announcement_subtitle', 'announcementSubtitle'),
    ('announcement_image', 'announcementImage'),
]
DECIMAL_FIELDS = [
    ('price', 'price'),
    ('discount_price', 'discountPrice'),
    ('announcement_price', 'announcementPrice'),
]
BOOL_FIELDS = [
    ('available', 'available'),
    ('is_featured', 'isFeatured'),
    ('is_announcement', 'isAnnouncement'),
    ('announcement_active', 'announcementActive'),
]
INT_FIELDS = [
    ('featured_order', 'featuredOrder'),
    ('announcement_priority', 'announcementPriority'),
]
REQUIRED_ON_CREATE = ('name', 'description', 'price', 'category')
NULLABLE = {'discount_price', 'announcement_price', 'announcement_title',
            'announcement_subtitle', 'announcement_image'}


class FieldError(ValueError):
    pass


def _pick(payload, column, client_key):
    if client_key in payload:
        return True, payload.get(client_key)
    if column in payload:
        return True, payload.get(column)
    return False, None


def _parse_ingredients(value):
    if value is None or value == '':
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            value = [part.strip() for part in value.split(',')]
    if not isinstance(value, list):
        raise FieldError('ingredients must be a list')
    return [str(v).strip() for v in value if str(v).strip()]


def _item_fields(payload):
    """
    Translate client field names into MenuItem columns.
    Only keys present in the payload are returned, so the same mapping
    serves both create and partial update.
    """
    fields = {}
    for column, key in TEXT_FIELDS:
        present, value = _pick(payload, column, key)
        if present:
            value = '' if value is None else str(value).strip()
            fields[column] = value or (None if column in NULLABLE else '')

    for column, key in DECIMAL_FIELDS:
        present, value = _pick(payload, column, key)
        if not present:
            continue
        if value is None or str(value).strip() == '':
            if column not in NULLABLE:
                raise FieldError(f'{key} is required')
            fields[column] = None
            continue
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise FieldError(f'{key} must be a valid number')
        if not amount.is_finite() or amount < 0:
            raise FieldError(f'{key} cannot be negative')
        fields[column] = amount

    for column, key in BOOL_FIELDS:
        present, value = _pick(payload, column, key)
        if present and value is not None and value != '':
            fields[column] = parse_bool(value)

    for column, key in INT_FIELDS:
        present, value = _pick(payload, column, key)
        if present and value is not None and value != '':
            try:
                fields[column] = int(value)
            except (TypeError, ValueError):
                raise FieldError(f'{key} must be an integer')

    present, value = _pick(payload, 'ingredients', 'ingredients')
    if present:
        fields['ingredients'] = _parse_ingredients(value)

    present, value = _pick(payload, 'image', 'image')
    if present and isinstance(value, str):
        fields['image'] = value

    return fields


def _read_payload(request):
    """(fields, uploaded image) from a JSON or multipart body."""
    ctype = request.content_type or ''
    if ctype.startswith('multipart/form-data'):
        if request.method == 'POST':
            return request.POST, request.FILES.get('image')
        # django only parses multipart bodies for POST
        parser = MultiPartParser(request.META, io.BytesIO(request.body), request.upload_handlers, request.encoding)
        post, files = parser.parse()
        return post, files.get('image')
    return read_json(request), None


def _visible_items(request):
    qs = MenuItem.objects.all()
    if not has_authorization_header(request):
        qs = qs.filter(available=True)
    return qs


# GET  /api/menu
# POST /api/menu
@csrf_exempt
@require_http_methods(['GET', 'POST'])
def menu_items(request):
    if request.method == 'POST':
        return create_menu_item(request)
    items = _visible_items(request).order_by('category', 'name')
    return ok([it.to_dict() for it in items])


@require_admin
def create_menu_item(request):
    try:
        payload, image_file = _read_payload(request)
        fields = _item_fields(payload)
    except (ValueError, MultiPartParserError) as e:
        return fail(str(e), 'VALIDATION_ERROR', 400)

    missing = [name for name in REQUIRED_ON_CREATE if fields.get(name) in (None, '')]
    if missing:
        return fail('Please provide all required fields: name, description, price, category', 'VALIDATION_ERROR', 400)

    if image_file is not None:
        try:
            fields['image'] = store_image(image_file)
        except ImageRejected as e:
            return fail(str(e), 'INVALID_IMAGE', 400)

    item = MenuItem.objects.create(**fields)
    logger.info('Menu item %s created by admin %s', item.id, request.admin.id)
    return ok(item.to_dict(), status=201)


@csrf_exempt
@require_http_methods(['GET'])
def featured_items(request):
    try:
        items = list(
            MenuItem.objects
            .filter(available=True, is_featured=True)
            .order_by('featured_order', 'name')
        )
    except DatabaseError:
        logger.exception('Featured items lookup failed')
        return ok([])
    return ok([it.to_dict() for it in items])


@csrf_exempt
@require_http_methods(['GET'])
def announcement(request):
    try:
        item = (
            MenuItem.objects
            .filter(is_announcement=True, announcement_active=True, available=True)
            .order_by('announcement_priority', 'id')
            .first()
        )
    except DatabaseError:
        logger.exception('Announcement lookup failed')
        item = None

    if item is None:
        return ok(None)
    return ok({
        'id': item.id,
        'title': item.announcement_title or item.name,
        'subtitle': item.announcement_subtitle or item.description,
        'price': float(item.announcement_price if item.announcement_price is not None else item.price),
        'image': item.announcement_image or item.image,
        'menuItem': item.to_dict(),
    })


# GET    /api/menu/<id>
# PUT    /api/menu/<id>
# DELETE /api/menu/<id>
@csrf_exempt
@require_http_methods(['GET', 'PUT', 'DELETE'])
def menu_item_detail(request, item_id):
    iid = parse_id(item_id)
    if iid is None:
        return fail('Invalid menu item ID format', 'INVALID_ID', 400)
    if request.method == 'PUT':
        return update_menu_item(request, iid)
    if request.method == 'DELETE':
        return delete_menu_item(request, iid)

    item = _visible_items(request).filter(id=iid).first()
    if item is None:
        return fail('Menu item not found', 'NOT_FOUND', 404)
    return ok(item.to_dict())


@require_admin
def update_menu_item(request, iid):
    try:
        item = MenuItem.objects.get(id=iid)
    except MenuItem.DoesNotExist:
        return fail('Menu item not found', 'NOT_FOUND', 404)

    try:
        payload, image_file = _read_payload(request)
        fields = _item_fields(payload)
    except (ValueError, MultiPartParserError) as e:
        return fail(str(e), 'VALIDATION_ERROR', 400)

    for column in ('name', 'description', 'category'):
        if column in fields and not fields[column]:
            return fail(f'{column} cannot be empty', 'VALIDATION_ERROR', 400)

    if image_file is not None:
        try:
            fields['image'] = store_image(image_file)
        except ImageRejected as e:
            return fail(str(e), 'INVALID_IMAGE', 400)

    for column, value in fields.items():
        setattr(item, column, value)
    item.save()
    item.refresh_from_db()

    return ok(item.to_dict())


@require_admin
def delete_menu_item(request, iid):
    try:
        item = MenuItem.objects.get(id=iid)
    except MenuItem.DoesNotExist:
        return fail('Menu item not found', 'NOT_FOUND', 404)

    item.delete()
    logger.info('Menu item %s deleted by admin %s', iid, request.admin.id)
    return ok(message='Menu item deleted successfully')


# Categories

def category_slug(name):
    return re.sub(r'\s+', '-', name.strip().lower())


def _item_counts(names):
    rows = (
        MenuItem.objects
        .filter(available=True, category__in=names)
        .values('category')
        .annotate(n=Count('id'))
    )
    return {row['category']: row['n'] for row in rows}


def _with_count(category, counts):
    data = category.to_dict()
    data['itemCount'] = counts.get(category.name, 0)
    return data


# GET  /api/categories
# POST /api/categories
@csrf_exempt
@require_http_methods(['GET', 'POST'])
def categories(request):
    if request.method == 'POST':
        return create_category(request)

    cats = list(Category.objects.filter(is_active=True).order_by('sort_order', 'id'))
    counts = _item_counts([c.name for c in cats])
    return ok([_with_count(c, counts) for c in cats])


@require_admin
def create_category(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    name = str(data.get('name') or '').strip()
    display_name = str(data.get('displayName') or '').strip()
    if not name or not display_name:
        return fail('Please provide name and displayName', 'VALIDATION_ERROR', 400)

    slug = category_slug(name)
    if Category.objects.filter(name=slug).exists():
        return fail('Category name already exists', 'DUPLICATE_NAME', 400)

    try:
        sort_order = int(data.get('sortOrder') or 0)
    except (TypeError, ValueError):
        return fail('sortOrder must be an integer', 'VALIDATION_ERROR', 400)

    try:
        category = Category.objects.create(
            name=slug,
            display_name=display_name,
            icon=data.get('icon') or '📁',
            background_color=data.get('backgroundColor') or '#FFE5E5',
            sort_order=sort_order,
            is_active=True,
        )
    except IntegrityError:
        return fail('Category name already exists', 'DUPLICATE_NAME', 400)

    return ok(category.to_dict(), status=201)


# GET    /api/categories/<id>
# PUT    /api/categories/<id>
# DELETE /api/categories/<id>
@csrf_exempt
@require_http_methods(['GET', 'PUT', 'DELETE'])
def category_detail(request, category_id):
    cid = parse_id(category_id)
    if cid is None:
        return fail('Invalid category ID format', 'INVALID_ID', 400)
    if request.method == 'PUT':
        return update_category(request, cid)
    if request.method == 'DELETE':
        return delete_category(request, cid)

    category = Category.objects.filter(id=cid, is_active=True).first()
    if category is None:
        return fail('Category not found', 'NOT_FOUND', 404)
    return ok(_with_count(category, _item_counts([category.name])))


@require_admin
def update_category(request, cid):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    try:
        category = Category.objects.get(id=cid)
    except Category.DoesNotExist:
        return fail('Category not found', 'NOT_FOUND', 404)

    # renaming does not touch menu_items.category
    if data.get('name') is not None:
        if not str(data['name']).strip():
            return fail('name cannot be empty', 'VALIDATION_ERROR', 400)
        category.name = category_slug(str(data['name']))
    if data.get('displayName') is not None:
        category.display_name = data['displayName']
    if data.get('icon') is not None:
        category.icon = data['icon']
    if data.get('backgroundColor') is not None:
        category.background_color = data['backgroundColor']
    if data.get('sortOrder') is not None:
        try:
            category.sort_order = int(data['sortOrder'])
        except (TypeError, ValueError):
            return fail('sortOrder must be an integer', 'VALIDATION_ERROR', 400)
    if data.get('isActive') is not None:
        category.is_active = parse_bool(data['isActive'])

    try:
        category.save()
    except IntegrityError:
        return fail('Category name already exists', 'DUPLICATE_NAME', 400)

    return ok(category.to_dict())


@require_admin
def delete_category(request, cid):
    try:
        category = Category.objects.get(id=cid)
    except Category.DoesNotExist:
        return fail('Category not found', 'NOT_FOUND', 404)

    if MenuItem.objects.filter(category=category.name).exists():
        return fail('Cannot delete category with existing menu items', 'HAS_MENU_ITEMS', 400)

    category.delete()
    return ok(message='Category deleted successfully')
