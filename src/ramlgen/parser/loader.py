"""Load API descriptions from a URL, local file, or stdin.

This module handles all I/O for fetching raw RAML documents and converting
them into Python dictionaries. RAML is YAML, so YAML is the primary
format; JSON documents (which are valid YAML too) are accepted as well.

The public function is :func:`load_description`. After loading, the raw
dict should be passed to :func:`~ramlgen.parser.builder.build_description`
which validates its structure and builds an
:class:`~ramlgen.models.ApiDescription`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from ramlgen.exceptions import DescriptionParseError

logger = logging.getLogger(__name__)

RAML_HEADER = "#%RAML"
SUPPORTED_RAML_VERSIONS = ("0.8",)


def load_description(source: str) -> dict[str, Any]:
    """Load a description from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed description as a dictionary.

    Raises:
        DescriptionParseError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise DescriptionParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise DescriptionParseError("No input received from stdin")

    return parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a description from *url*, using the content type as a format hint."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DescriptionParseError(
            f"HTTP {exc.response.status_code} fetching description from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DescriptionParseError(
            f"Failed to fetch description from {url}: {exc}"
        ) from exc

    content_type = response.headers.get("content-type", "")
    hint = "json" if "json" in content_type else ""
    return parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a description from a local ``.raml``, ``.yaml``, ``.yml`` or ``.json`` file."""
    file_path = Path(path)
    if not file_path.is_file():
        raise DescriptionParseError(f"Description file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise DescriptionParseError(f"Description file is not valid UTF-8: {path} ({exc})") from exc
    except OSError as exc:
        raise DescriptionParseError(f"Failed to read description file {path}: {exc}") from exc

    if not content.strip():
        raise DescriptionParseError(f"Description file is empty: {path}")

    hint = "json" if file_path.suffix.lower() == ".json" else ""
    return parse_content(content, hint=hint)


def parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Content hinted as JSON is parsed strictly as JSON. Everything else goes
    through :func:`yaml.safe_load`, which also accepts JSON.

    Raises:
        DescriptionParseError: If the content cannot be parsed or is not a mapping.
    """
    version = raml_version(content)
    if version is not None and version not in SUPPORTED_RAML_VERSIONS:
        logger.warning(
            "RAML %s document: only the %s subset is understood",
            version,
            ", ".join(SUPPORTED_RAML_VERSIONS),
        )

    if hint == "json":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            raise DescriptionParseError(f"Invalid JSON: {exc}") from exc
    else:
        try:
            result = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise DescriptionParseError(f"Invalid YAML: {exc}") from exc

    if not isinstance(result, dict):
        raise DescriptionParseError(
            "Description must be a JSON/YAML object (got "
            f"{type(result).__name__ if result is not None else 'empty document'})"
        )
    return result


def raml_version(content: str) -> Optional[str]:
    """Return the version from a leading ``#%RAML <version>`` line, if any.

    The header is a YAML comment, so it has to be read before parsing.
    """
    first_line = content.lstrip("\ufeff").split("\n", 1)[0].strip()
    if not first_line.startswith(RAML_HEADER):
        return None
    version = first_line[len(RAML_HEADER):].strip()
    return version or None
