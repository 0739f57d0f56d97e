from __future__ import annotations

from django.conf import settings
from django.utils.module_loading import import_string


GALLERY_DEFAULTS = {
    "API_BASE_URL": "https://dummyjson.com",
    "API_TIMEOUT": 10,
    "API_PAGE_LIMIT": None,
    "CLIENT_CLASS": "gallery.client.ProductApiClient",
}


def get_gallery_setting(key: str):
    """Retrieve a Gallery setting, falling back to GALLERY_DEFAULTS."""
    user_settings = getattr(settings, "GALLERY", {})
    return user_settings.get(key, GALLERY_DEFAULTS.get(key))


def get_catalog_client():
    """Instancia o client configurado em GALLERY["CLIENT_CLASS"]."""
    client_class = get_gallery_setting("CLIENT_CLASS")
    if isinstance(client_class, str):
        client_class = import_string(client_class)
    return client_class()
