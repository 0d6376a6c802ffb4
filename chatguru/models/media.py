"""
Media field normalization for ChatGuru webhook payloads.

ChatGuru has shipped two media encodings over time:

* the older one sends ``media_url`` and ``media_type`` (a MIME string);
* the newer one sends ``tipo_mensagem`` (a message kind such as ``"ptt"``)
  and ``url_arquivo`` / ``url_midia`` (the file URL).

Both are folded into a single URL + MIME type pair.
"""

from __future__ import annotations

from dataclasses import dataclass

MESSAGE_KIND_MIME_TYPES: dict[str, str] = {
    "image": "image/jpeg",
    "ptt": "audio/ogg",  # push-to-talk (voice note)
    "audio": "audio/ogg",
    "video": "video/mp4",
    "document": "application/pdf",
}


@dataclass(frozen=True)
class MediaReference:
    """Canonical view of the media attached to a message."""

    url: str | None
    mime_type: str | None


def mime_type_for_kind(kind: str) -> str:
    """
    Map a ChatGuru message kind to a MIME type.

    Unknown kinds are kept as ``application/<kind>`` rather than discarded.
    """
    return MESSAGE_KIND_MIME_TYPES.get(kind, f"application/{kind}")


def normalize_media(
    *,
    media_url: str | None,
    media_type: str | None,
    message_kind: str | None,
    file_url: str | None,
) -> MediaReference:
    """
    Fold the legacy and the newer media encodings into one reference.

    Already-populated canonical values are never overwritten, so applying the
    result again is a no-op. The URL and the type are filled independently: a
    payload with an explicit ``media_url`` but no ``media_type`` still gets a
    type derived from its message kind.
    """
    if media_url is not None and media_type is not None:
        return MediaReference(url=media_url, mime_type=media_type)

    url = media_url
    if url is None and file_url is not None:
        url = file_url

    mime_type = media_type
    if mime_type is None and message_kind is not None:
        mime_type = mime_type_for_kind(message_kind)

    return MediaReference(url=url, mime_type=mime_type)
