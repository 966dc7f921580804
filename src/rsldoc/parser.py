"""
Reads RSL XML back into editable contents.

Parsing is best effort: a document that is not well formed, or that has no content elements,
is replaced with a single content for the fallback URL rather than raising.
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from bs4 import BeautifulSoup
from bs4.element import Tag
from lxml import etree

from rsldoc.licenses import create_license
from rsldoc.models import (Content, CopyrightType, LegalTerms, License, Metadata,
                           Payment, PaymentType, Permissions, PermissionType, RslData)
from rsldoc.utils import new_license_id, split_tokens, xml_declaration_pattern

logger = logging.getLogger(__name__)

PERMISSION_KEYS = frozenset(key.value for key in PermissionType)
"""Values of the type attribute on permits / prohibits that are read."""


def _text(tag: Optional[Tag]) -> Optional[str]:
    """Returns the text content of *tag*, or None if it has none."""
    if tag is None:
        return None
    return tag.get_text() or None

def _read_permissions(license_tag: Tag, name: str, permissions: Permissions) -> None:
    """
    Copies the tokens of each *name* element in *license_tag* into *permissions*.
    Elements with an unrecognised type are ignored.
    """
    for tag in license_tag.find_all(name):
        key = tag.get('type')
        if key in PERMISSION_KEYS:
            setattr(permissions, key, split_tokens(tag.get_text()))

def _read_payment(payment_tag: Tag) -> Payment:
    payment = Payment(type = payment_tag.get('type') or PaymentType.FREE.value)
    payment.standard_urls = [
        tag.get_text() for tag in payment_tag.find_all('standard') if tag.get_text()]
    payment.custom_url = _text(payment_tag.find('custom'))

    amount = payment_tag.find('amount')
    if amount is not None:
        payment.amount = _text(amount)
        payment.currency = amount.get('currency') or None
    return payment

def read_license(license_tag: Tag, index: int = 0) -> License:
    """
    Creates a License from a license element.
    The license is given a new ID, and a name based on its position in the content.

    :param license_tag: The license element.
    :type license_tag: Tag
    :param index: Position of the license in its content, defaults to 0
    :type index: int, optional
    :return: A new License.
    :rtype: License
    """
    license = License(
        id = new_license_id(),
        name = f'License Option {index + 1}',
        permits = Permissions(),
        prohibits = Permissions(),
        payment = Payment(),
        legal = []
    )
    _read_permissions(license_tag, 'permits', license.permits)
    _read_permissions(license_tag, 'prohibits', license.prohibits)

    payment_tag = license_tag.find('payment')
    if payment_tag is not None:
        license.payment = _read_payment(payment_tag)

    for legal_tag in license_tag.find_all('legal'):
        legal_type = legal_tag.get('type')
        terms = split_tokens(legal_tag.get_text())
        if legal_type and terms:
            license.legal.append(LegalTerms(legal_type, terms))

    return license

def read_metadata(content_tag: Tag) -> Metadata:
    """
    Creates Metadata from the first schema, copyright and terms elements in *content_tag*.
    A copyright element whose type is not exactly "organization" is read as a person.

    :param content_tag: The content element.
    :type content_tag: Tag
    :rtype: Metadata
    """
    metadata = Metadata(
        schema_url = _text(content_tag.find('schema')),
        terms_url = _text(content_tag.find('terms'))
    )
    copyright = content_tag.find('copyright')
    if copyright is not None:
        metadata.copyright_type = (
            CopyrightType.ORGANIZATION.value
            if copyright.get('type') == CopyrightType.ORGANIZATION.value
            else CopyrightType.PERSON.value
        )
        metadata.copyright_holder = _text(copyright)
        metadata.contact_email = copyright.get('contactEmail') or None
        metadata.contact_url = copyright.get('contactUrl') or None
    return metadata

def read_content(content_tag: Tag, fallback_url: str) -> Content:
    """
    Creates a Content from a content element.

    :param content_tag: The content element.
    :type content_tag: Tag
    :param fallback_url: URL to use if the element has no url attribute.
    :type fallback_url: str
    :rtype: Content
    """
    return Content(
        url = content_tag.get('url') or fallback_url,
        rsl = RslData(
            license_server = content_tag.get('server') or None,
            encrypted = content_tag.get('encrypted') == 'true',
            last_modified = content_tag.get('lastmod') or None,
            licenses = [
                read_license(license_tag, index)
                for index, license_tag in enumerate(content_tag.find_all('license'))
            ],
            metadata = read_metadata(content_tag)
        )
    )

def fallback_contents(fallback_url: str) -> list[Content]:
    """
    Returns the contents used in place of a document that could not be read:
    a single content for *fallback_url* with one new free license.
    """
    return [Content(fallback_url, RslData(
        licenses = [create_license('free')],
        metadata = Metadata()
    ))]

def parse_document(document: Union[str, bytes], fallback_url: str) -> list[Content]:
    """
    Parses an RSL document into a list of Content, in document order.
    Never raises for bad input; see ``fallback_contents``.

    :param document: The RSL document. An encoding declared in a str document is ignored,
    bytes are decoded as declared.
    :type document: Union[str, bytes]
    :param fallback_url: URL for contents with no url attribute,
    and for the fallback content.
    :type fallback_url: str
    :return: A non-empty list of Content.
    :rtype: list[Content]
    """
    try:
        if isinstance(document, str):
            # already decoded, so a declared encoding no longer applies
            raw = xml_declaration_pattern.sub('', document, count = 1).encode('utf-8')
            encoding = 'utf-8'
        else:
            raw, encoding = bytes(document), None
        etree.fromstring(raw, etree.XMLParser(resolve_entities = False, no_network = True))
        soup = BeautifulSoup(raw, 'xml', from_encoding = encoding)
        contents = [read_content(tag, fallback_url) for tag in soup.find_all('content')]
    except Exception as err:
        logger.warning(f'Failed to parse RSL document, using fallback content: {err}')
        return fallback_contents(fallback_url)

    if not contents:
        logger.warning('RSL document has no content elements, using fallback content')
        return fallback_contents(fallback_url)
    return contents
