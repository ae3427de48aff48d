"""Collect the response media types an action can produce."""

from __future__ import annotations

from ramlgen.models import Action, MimeType


def unique_response_media_types(action: Action) -> list[MimeType]:
    """Return every response media type of *action*, deduplicated by type string.

    Responses are walked in declaration order and the first occurrence of a
    media type wins. Responses without a body contribute nothing, so an
    empty result means no response media type is ever produced.
    """
    seen: dict[str, MimeType] = {}
    for response in action.responses.values():
        if not response.has_body():
            continue
        for mime_type in response.body.values():
            if mime_type is not None and mime_type.type not in seen:
                seen[mime_type.type] = mime_type
    return list(seen.values())
