"""
This module contains some utility functions / useful constants.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, Optional
from urllib.parse import urlsplit
from uuid import uuid4

logger = logging.getLogger(__name__)

#############
# Constants #
#############

RSL_NAMESPACE = 'https://rslstandard.org/rsl'
"""Namespace of the RSL vocabulary."""

RSL_MIME_TYPE = 'application/rsl+xml'
"""Media type used when linking or embedding RSL documents."""

## Regex patterns

email_pattern = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
url_scheme_pattern = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*$')
xml_declaration_pattern = re.compile(r'^\ufeff?\s*<\?xml\s[^>]*\?>')
xml_illegal_pattern = re.compile('[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]')
"""Characters which may not appear anywhere in an XML 1.0 document."""

HOST_SCHEMES = ('http', 'https', 'ws', 'wss', 'ftp', 'file')
"""URL schemes which require an authority component."""

###########
# Helpers #
###########

def new_license_id() -> str:
    """
    Returns a new identifier for a license, unique within the process.
    """
    return f'license-{uuid4().hex[:16]}'

def split_tokens(text: Optional[str]) -> list[str]:
    """
    Splits a comma separated list, dropping whitespace and empty tokens.

    :param text: The text to split.
    :type text: str, optional
    :return: The tokens in *text*, in order.
    :rtype: list[str]
    """
    if not text:
        return []
    return [token.strip() for token in text.split(',') if token.strip()]

def join_tokens(tokens: Iterable[str]) -> str:
    return ','.join(str(token) for token in tokens)

def xml_text(value: Any) -> str:
    """
    Returns *value* as a string, without the characters XML 1.0 cannot represent.
    """
    return xml_illegal_pattern.sub('', str(value))

def valid_url(url: str) -> bool:
    """
    Returns True if *url* can be parsed as an absolute URL.

    :param url: The URL to test.
    :type url: str
    :rtype: bool
    """
    try:
        parts = urlsplit(url.strip())
        parts.port  # raises ValueError on a malformed port
    except (ValueError, AttributeError):
        return False

    if not (parts.scheme and url_scheme_pattern.match(parts.scheme)):
        return False
    if parts.scheme.lower() in HOST_SCHEMES:
        host = parts.hostname
        if parts.scheme.lower() != 'file' and not host:
            return False
        if host and any(char.isspace() for char in host):
            return False
    elif not (parts.netloc or parts.path):
        return False
    return True

def valid_email(email: str) -> bool:
    """
    Returns True if *email* has the shape ``local@domain.tld``.
    """
    return bool(email_pattern.match(str(email)))

############
# File I/O #
############

def read_json(path: str) -> Any:
    with open(path, 'r', encoding = 'utf-8') as stream:
        return json.load(stream)

def write_text(text: str, path: Optional[str] = None) -> None:
    """
    Writes *text* to the file at *path*, or to stdout if *path* is not set.

    :param text: The text to write.
    :type text: str
    :param path: Path of the output file, defaults to None
    :type path: str, optional
    """
    if path:
        with open(path, 'w', encoding = 'utf-8') as stream:
            stream.write(text)
        logger.info(f'Wrote {len(text)} characters to {path}')
    else:
        print(text)

