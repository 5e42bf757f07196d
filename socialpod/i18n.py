"""
Message catalogue for user-facing API error bodies.

Keys are dotted paths such as ``api.endpoint_errors.photos.not_found``.
Unknown locales fall back to English, unknown keys to the key itself.
"""

from typing import Dict, List, Optional, Tuple

DEFAULT_LOCALE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "api.endpoint_errors.photos.not_found": "Photo with provided guid could not be found",
        "api.endpoint_errors.photos.failed_create": "Failed to create the photo",
        "api.endpoint_errors.posts.post_not_found": "Post with provided guid could not be found",
        "api.endpoint_errors.posts.failed_create": "Failed to create the post",
        "api.endpoint_errors.comments.not_allowed": "User is not allowed to comment",
        "api.endpoint_errors.likes.like_exists": "Like already exists",
        "api.endpoint_errors.notifications.not_found": "Notification with provided guid could not be found",
        "api.endpoint_errors.notifications.cant_process": "Couldn't process the notifications requested",
        "api.endpoint_errors.aspects.not_found": "Aspect with provided ID could not be found",
        "api.endpoint_errors.aspects.cant_create": "Failed to create the aspect",
        "api.endpoint_errors.contacts.not_found": "Person with provided guid could not be found",
        "api.endpoint_errors.contacts.cant_create": "Failed to add user to aspect",
    },
    "de": {
        "api.endpoint_errors.photos.not_found": "Foto mit der angegebenen GUID konnte nicht gefunden werden",
        "api.endpoint_errors.photos.failed_create": "Foto konnte nicht erstellt werden",
        "api.endpoint_errors.notifications.not_found": "Benachrichtigung mit der angegebenen GUID konnte nicht gefunden werden",
    },
}


def _parse_accept_language(accept_language: str) -> List[Tuple[str, float]]:
    """Language tags of the header, highest q-weight first, ties kept in header order."""
    weighted = []
    for part in accept_language.split(","):
        tag, _, params = part.strip().partition(";")
        tag = tag.strip().lower()
        if not tag:
            continue
        weight = 1.0
        for param in params.split(";"):
            name, _, value = param.strip().partition("=")
            if name == "q":
                try:
                    weight = float(value)
                except ValueError:
                    weight = 0.0
        weighted.append((tag, weight))
    return sorted(weighted, key=lambda item: item[1], reverse=True)


def locale_from_header(accept_language: Optional[str]) -> str:
    """Pick the most preferred locale of an Accept-Language header that has a catalogue."""
    if not accept_language:
        return DEFAULT_LOCALE
    for tag, weight in _parse_accept_language(accept_language):
        if weight <= 0:
            continue
        language = tag.split("-")[0]
        if language in MESSAGES:
            return language
    return DEFAULT_LOCALE


def t(key: str, locale: Optional[str] = None) -> str:
    catalogue = MESSAGES.get(locale or DEFAULT_LOCALE, {})
    if key in catalogue:
        return catalogue[key]
    return MESSAGES[DEFAULT_LOCALE].get(key, key)
