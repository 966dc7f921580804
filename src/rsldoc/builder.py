"""
Serialises contents to RSL XML.

Elements are built as BeautifulSoup Tags by the ``*_tag`` functions,
which other output formats reuse (with a namespace prefix) to embed RSL fragments.
``render`` then writes a Tag tree with two spaces of indentation per level.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from bs4.dammit import EntitySubstitution
from bs4.element import Comment, NavigableString, PageElement, Tag

from rsldoc.models import Content, License, Metadata, Payment, Permissions, value_of
from rsldoc.utils import RSL_NAMESPACE, join_tokens, xml_text

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
INDENT = '  '
EMPTY_DOCUMENT_COMMENT = 'No content selected for licensing'

EMPTY_DOCUMENT = '\n'.join([
    XML_DECLARATION,
    f'<rsl xmlns="{RSL_NAMESPACE}">',
    f'{INDENT}<!-- {EMPTY_DOCUMENT_COMMENT} -->',
    '</rsl>'
])
"""The document built from an empty list of contents."""

########
# Tags #
########

def new_tag(
        name: str,
        attrs: Mapping[str, Any] = None,
        string: Any = None,
        prefix: Optional[str] = None,
        can_be_empty: bool = True
    ) -> Tag:
    """
    Creates a new XML Tag. Attributes with a falsy value are omitted.

    :param name: Local name of the element.
    :type name: str
    :param attrs: Attributes to set, in order, defaults to None
    :type attrs: Mapping[str, Any], optional
    :param string: Text content of the element, converted to a string, defaults to None
    :type string: Any, optional
    :param prefix: Namespace prefix of the element, defaults to None
    :type prefix: str, optional
    :param can_be_empty: Whether the element self-closes when it has no content, defaults to True
    :type can_be_empty: bool, optional
    :return: A new Tag.
    :rtype: Tag
    """
    tag = Tag(
        name = name,
        prefix = prefix,
        is_xml = True,
        can_be_empty_element = can_be_empty,
        attrs = {key: str(value_of(value)) for key, value in (attrs or {}).items() if value}
    )
    text = '' if string is None else str(value_of(string))
    if text:
        tag.string = text
    return tag

def permission_tags(name: str, permissions: Optional[Permissions], prefix: str = None) -> list[Tag]:
    """
    Returns one *name* element (permits or prohibits) per non-empty token list.
    """
    if permissions is None:
        return []
    return [
        new_tag(name, {'type': key}, join_tokens(tokens), prefix)
        for key, tokens in permissions if tokens
    ]

def payment_tag(payment: Payment, prefix: str = None) -> Optional[Tag]:
    """
    Returns the payment element for *payment*, or None if it has no type.
    The amount is only written when both an amount and a currency are set.

    :param payment: The payment terms.
    :type payment: Payment
    :param prefix: Namespace prefix, defaults to None
    :type prefix: str, optional
    :rtype: Optional[Tag]
    """
    if not payment.type:
        return None
    tag = new_tag('payment', {'type': payment.type}, prefix = prefix)
    for url in payment.standard_urls:
        tag.append(new_tag('standard', string = url, prefix = prefix))
    if payment.custom_url:
        tag.append(new_tag('custom', string = payment.custom_url, prefix = prefix))
    if payment.amount and payment.currency:
        tag.append(new_tag('amount', {'currency': payment.currency}, payment.amount, prefix))
    return tag

def license_tag(license: License, prefix: str = None) -> Tag:
    """
    Returns the license element for *license*:
    permits, prohibits, payment, then legal terms.

    :param license: The license to serialise.
    :type license: License
    :param prefix: Namespace prefix, defaults to None
    :type prefix: str, optional
    :rtype: Tag
    """
    tag = new_tag('license', prefix = prefix, can_be_empty = False)
    for child in permission_tags('permits', license.permits, prefix):
        tag.append(child)
    for child in permission_tags('prohibits', license.prohibits, prefix):
        tag.append(child)
    if license.payment is not None:
        payment = payment_tag(license.payment, prefix)
        if payment is not None:
            tag.append(payment)
    for legal in license.legal:
        tag.append(new_tag('legal', {'type': legal.type}, join_tokens(legal.terms), prefix))
    return tag

def metadata_tags(metadata: Optional[Metadata], prefix: str = None) -> list[Tag]:
    """
    Returns the schema, copyright and terms elements for the values set in *metadata*.
    """
    if metadata is None:
        return []
    tags = []
    if metadata.schema_url:
        tags.append(new_tag('schema', string = metadata.schema_url, prefix = prefix))
    if metadata.has_copyright:
        tags.append(new_tag('copyright', {
            'type': metadata.copyright_type,
            'contactEmail': metadata.contact_email,
            'contactUrl': metadata.contact_url
        }, metadata.copyright_holder, prefix))
    if metadata.terms_url:
        tags.append(new_tag('terms', string = metadata.terms_url, prefix = prefix))
    return tags

def content_tag(content: Content, prefix: str = None) -> Tag:
    """
    Returns the content element for *content*, containing its licenses and then its metadata.
    The encrypted attribute is only written when true.

    :param content: The content to serialise.
    :type content: Content
    :param prefix: Namespace prefix, defaults to None
    :type prefix: str, optional
    :rtype: Tag
    """
    rsl = content.rsl
    tag = new_tag('content', prefix = prefix, can_be_empty = False)
    # url is always written, even when empty
    tag.attrs['url'] = str(content.url or '')
    if rsl.license_server:
        tag.attrs['server'] = str(rsl.license_server)
    if rsl.encrypted:
        tag.attrs['encrypted'] = 'true'
    if rsl.last_modified:
        tag.attrs['lastmod'] = str(rsl.last_modified)

    for license in rsl.licenses:
        tag.append(license_tag(license, prefix))
    for child in metadata_tags(rsl.metadata, prefix):
        tag.append(child)
    return tag

def document_tag(contents: Iterable[Content]) -> Tag:
    """
    Returns the root rsl element containing a content element per item in *contents*,
    or a placeholder comment if there are none.
    """
    root = new_tag('rsl', {'xmlns': RSL_NAMESPACE}, can_be_empty = False)
    for content in contents:
        root.append(content_tag(content))
    if not root.contents:
        root.append(Comment(EMPTY_DOCUMENT_COMMENT))
    return root

#############
# Rendering #
#############

def _qualified_name(tag: Tag) -> str:
    return f'{tag.prefix}:{tag.name}' if tag.prefix else tag.name

def _attribute(value: str) -> str:
    return '"' + EntitySubstitution.substitute_xml(xml_text(value)).replace('"', '&quot;') + '"'

def _start_tag(tag: Tag, close: bool = False) -> str:
    attrs = ''.join(f' {key}={_attribute(value)}' for key, value in tag.attrs.items())
    return f'<{_qualified_name(tag)}{attrs}{"/" if close else ""}>'

def _render(element: PageElement, depth: int, lines: list[str]) -> None:
    """
    Appends the lines of *element* to *lines*, indented to *depth*.
    Elements containing only text are written on a single line.
    """
    indent = INDENT * depth
    if isinstance(element, Comment):
        lines.append(f'{indent}<!-- {element} -->')
        return
    if isinstance(element, NavigableString):
        if element.strip():
            lines.append(indent + EntitySubstitution.substitute_xml(xml_text(element.strip())))
        return

    children = element.contents
    if not children:
        if element.can_be_empty_element:
            lines.append(indent + _start_tag(element, close = True))
        else:
            lines.append(f'{indent}{_start_tag(element)}</{_qualified_name(element)}>')

    elif all(isinstance(child, NavigableString) and not isinstance(child, Comment)
            for child in children):
        text = EntitySubstitution.substitute_xml(xml_text(element.get_text()))
        lines.append(f'{indent}{_start_tag(element)}{text}</{_qualified_name(element)}>')

    else:
        lines.append(indent + _start_tag(element))
        for child in children:
            _render(child, depth + 1, lines)
        lines.append(f'{indent}</{_qualified_name(element)}>')

def render(tag: Tag, depth: int = 0) -> str:
    """
    Serialises *tag* and its descendants, starting at indentation level *depth*.
    Characters which XML cannot represent are dropped from text and attribute values.

    :param tag: The root of the tree to serialise.
    :type tag: Tag
    :param depth: Initial indentation level, defaults to 0
    :type depth: int, optional
    :return: The serialised XML, without a trailing newline.
    :rtype: str
    """
    lines: list[str] = []
    _render(tag, depth, lines)
    return '\n'.join(lines)

def build_document(contents: Iterable[Content]) -> str:
    """
    Builds an RSL document from *contents*, in order.
    Contents are not validated; see ``rsldoc.validator``.

    :param contents: The contents to license.
    :type contents: Iterable[Content]
    :return: The RSL document as a string.
    :rtype: str
    """
    contents = list(contents)
    logger.debug(f'Building RSL document with {len(contents)} contents')
    return XML_DECLARATION + '\n' + render(document_tag(contents))
