import base64
import mimetypes
from uuid import uuid4
from django.conf import settings
from azure.storage.blob import BlobServiceClient, ContentSettings

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}


class ImageRejected(ValueError):
    pass


def _client():
    return BlobServiceClient.from_connection_string(settings.AZURE_CONNECTION_STRING)

def build_blob_name(filename: str) -> str:
    ext = (filename.rsplit(".", 1)[-1] if "." in filename else "bin").lower()
    return f"menu/{uuid4().hex}.{ext}"

def _content_type(file_obj):
    ctype, _ = mimetypes.guess_type(getattr(file_obj, "name", "") or "")
    return ctype or getattr(file_obj, "content_type", None) or "application/octet-stream"

def embed_file(file_obj, ctype):
    encoded = base64.b64encode(file_obj.read()).decode("ascii")
    return f"data:{ctype};base64,{encoded}"

def upload_file(file_obj, ctype):
    blob_name = build_blob_name(getattr(file_obj, "name", "upload.bin"))
    blob_client = _client().get_blob_client(settings.AZURE_BLOB_CONTAINER, blob_name)
    blob_client.upload_blob(
        file_obj,
        overwrite=True,
        content_settings=ContentSettings(content_type=ctype),
    )
    return blob_client.url

def store_image(file_obj):
    """
    Persist an uploaded menu image and return the value kept in MenuItem.image.
    """
    ctype = _content_type(file_obj)
    if ctype not in ALLOWED_IMAGE_TYPES:
        raise ImageRejected(f"Unsupported image type: {ctype}")
    if settings.MENU_IMAGE_BACKEND == "azure":
        return upload_file(file_obj, ctype)
    return embed_file(file_obj, ctype)
