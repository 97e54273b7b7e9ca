# =============================================================================
# taskhub_core/errors/messages.py
# User-facing message catalogue (Indonesian default, English fallback)
# =============================================================================

from typing import Dict

DEFAULT_LOCALE = "id"

MESSAGES: Dict[str, Dict[str, str]] = {
    "storage.create": {
        "id": "Gagal membuat {entity}: {error}",
        "en": "Failed to create {entity}: {error}",
    },
    "storage.list": {
        "id": "Gagal mengambil {entity}: {error}",
        "en": "Failed to fetch {entity}: {error}",
    },
    "storage.update": {
        "id": "Gagal memperbarui {entity}: {error}",
        "en": "Failed to update {entity}: {error}",
    },
    "storage.delete": {
        "id": "Gagal menghapus {entity}: {error}",
        "en": "Failed to delete {entity}: {error}",
    },
    "storage.not_found": {
        "id": "{entity} dengan id {record_id} tidak ditemukan",
        "en": "{entity} with id {record_id} was not found",
    },
    "auth.login": {
        "id": "Gagal login: {error}",
        "en": "Login failed: {error}",
    },
    "auth.register": {
        "id": "Gagal mendaftar: {error}",
        "en": "Registration failed: {error}",
    },
    "validation.password_mismatch": {
        "id": "Password tidak cocok",
        "en": "Passwords do not match",
    },
    "network.offline": {
        "id": "Tidak ada koneksi internet",
        "en": "No internet connection",
    },
    "config.missing_supabase": {
        "id": "Kredensial Supabase belum dikonfigurasi ({config_key})",
        "en": "Supabase credentials are not configured ({config_key})",
    },
    "support.contact": {
        "id": "Silakan hubungi dukungan",
        "en": "Please contact support",
    },
}

ENTITY_LABELS: Dict[str, Dict[str, str]] = {
    "tasks": {"id": "tugas", "en": "task"},
    "products": {"id": "produk", "en": "product"},
}


def get_message(message_key: str, locale: str = DEFAULT_LOCALE, **kwargs) -> str:
    """
    Look up a message template and format it.

    Unknown locales fall back to English, unknown keys to the key itself.
    """
    templates = MESSAGES.get(message_key)
    if templates is None:
        return message_key
    template = templates.get(locale) or templates["en"]
    return template.format(**kwargs)


def entity_label(collection: str, locale: str = DEFAULT_LOCALE) -> str:
    """Human label for a collection name ("tasks" -> "tugas")."""
    labels = ENTITY_LABELS.get(collection)
    if labels is None:
        return collection
    return labels.get(locale) or labels["en"]
