"""
Embeds RSL licensing in other formats: RSS feeds, robots.txt, HTML pages and media file metadata.

The XML formats reuse the element functions of ``rsldoc.builder`` with the ``rsl`` namespace prefix.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence
from urllib.parse import urlsplit

from bs4.element import Comment, Tag

from rsldoc import builder
from rsldoc.builder import XML_DECLARATION, content_tag, new_tag, render
from rsldoc.models import Content, License, Payment, Permissions, RslData
from rsldoc.utils import RSL_MIME_TYPE, RSL_NAMESPACE
from rsldoc.validator import Severity, ValidationReport, ValidationResult

logger = logging.getLogger(__name__)

PREFIX = 'rsl'
"""Namespace prefix of RSL elements embedded in other XML formats."""

DEFAULT_LICENSE_FILE = 'license.xml'
"""Name of the RSL document relative to the website root."""

def license_url_for(website_url: str) -> str:
    """
    Returns the conventional location of the RSL document for *website_url*.
    """
    return f'{website_url.rstrip("/")}/{DEFAULT_LICENSE_FILE}'

def _limit(contents: Iterable[Content], max_items: Optional[int]) -> list[Content]:
    contents = list(contents)
    return contents[:max_items] if max_items else contents

#######
# RSS #
#######

def rss_content_blocks(contents: Iterable[Content], max_items: Optional[int] = None) -> str:
    """
    Returns an ``rsl:content`` block for each content, separated by blank lines,
    for pasting into the items of an existing feed.

    :param contents: The contents to embed.
    :type contents: Iterable[Content]
    :param max_items: Maximum number of contents to embed, defaults to all
    :type max_items: int, optional
    :rtype: str
    """
    return '\n\n'.join(
        render(content_tag(content, PREFIX)) for content in _limit(contents, max_items))

def _item_title(content: Content, number: int) -> str:
    path = urlsplit(content.url).path
    name = path.rstrip('/').split('/')[-1] if path.strip('/') else ''
    return f'Article {number} - {name}' if name else f'Article {number}'

def rss_feed(
        contents: Iterable[Content],
        title: str,
        link: str,
        description: str,
        max_items: Optional[int] = None
    ) -> str:
    """
    Returns an RSS 2.0 feed with an item for each content,
    each carrying its licensing as an ``rsl:content`` element.

    :param contents: The contents to publish.
    :type contents: Iterable[Content]
    :param title: Title of the channel.
    :type title: str
    :param link: Link of the channel.
    :type link: str
    :param description: Description of the channel.
    :type description: str
    :param max_items: Maximum number of items, defaults to all
    :type max_items: int, optional
    :rtype: str
    """
    rss = new_tag('rss', {'xmlns:rsl': RSL_NAMESPACE, 'version': '2.0'}, can_be_empty = False)
    channel = new_tag('channel', can_be_empty = False)
    rss.append(channel)
    channel.append(new_tag('title', string = title))
    channel.append(new_tag('link', string = link))
    channel.append(new_tag('description', string = description))

    for number, content in enumerate(_limit(contents, max_items), start = 1):
        item = new_tag('item', can_be_empty = False)
        item.append(new_tag('title', string = _item_title(content, number)))
        item.append(new_tag('link', string = content.url))
        item.append(new_tag('description', string = 'Content with RSL licensing information'))
        item.append(content_tag(content, PREFIX))
        channel.append(item)

    return XML_DECLARATION + '\n' + render(rss)

RSS_CHANNEL_COMMENT = 'Your RSS channel metadata (title, link, description, etc.)'
RSS_ITEM_COMMENT = 'Your RSS item metadata (title, link, description, pubDate, etc.)'
RSS_MORE_COMMENT = 'Additional RSS items...'

PLACEHOLDER_CONTENT = Content('your-content-url', RslData(licenses = [
    License('', permits = Permissions(usage = ['all']), payment = Payment())
]))
"""Stands in for real contents in an RSS template with none."""

def _template_item(content: Content) -> Tag:
    item = new_tag('item', can_be_empty = False)
    item.append(Comment(RSS_ITEM_COMMENT))
    item.append(content_tag(content, PREFIX))
    return item

def rss_template(contents: Iterable[Content], max_items: Optional[int] = None) -> str:
    """
    Returns an RSS 2.0 skeleton with an item per content,
    where comments mark the channel and item metadata for the publisher to fill in.
    A placeholder item is used if there are no contents.

    :param contents: The contents to embed.
    :type contents: Iterable[Content]
    :param max_items: Maximum number of items, defaults to all
    :type max_items: int, optional
    :rtype: str
    """
    contents = list(contents)
    rss = new_tag('rss', {'xmlns:rsl': RSL_NAMESPACE, 'version': '2.0'}, can_be_empty = False)
    channel = new_tag('channel', can_be_empty = False)
    rss.append(channel)
    channel.append(Comment(RSS_CHANNEL_COMMENT))

    if not contents:
        channel.append(_template_item(PLACEHOLDER_CONTENT))
        channel.append(Comment(RSS_MORE_COMMENT))
    else:
        for content in _limit(contents, max_items):
            channel.append(_template_item(content))
        if len(contents) > 2:
            channel.append(Comment(RSS_MORE_COMMENT))

    return XML_DECLARATION + '\n' + render(rss)

def validate_rss(contents: Iterable[Content]) -> ValidationReport:
    """
    Checks that *contents* can be published in an RSS feed.
    Missing URLs are errors, contents without licenses are warnings.
    """
    contents = list(contents)
    results = []
    if not contents:
        results.append(ValidationResult(
            Severity.WARNING, 'No RSL content provided - will generate fallback RSS structure'))

    for index, content in enumerate(contents):
        if not content.url:
            results.append(ValidationResult(
                Severity.ERROR, f'Content at index {index} is missing URL', f'Content {index + 1}'))
        if not content.rsl.licenses:
            results.append(ValidationResult(
                Severity.WARNING,
                f'Content "{content.url}" has no licenses - its RSS item will carry none',
                content.url
            ))
    return ValidationReport(results)

##############
# robots.txt #
##############

def robots_txt(
        license_url: Optional[str] = None,
        website_url: Optional[str] = None,
        template: bool = False,
        custom_directives: Sequence[str] = ()
    ) -> str:
    """
    Returns a robots.txt declaring the location of the RSL document with a License directive.

    :param license_url: URL of the RSL document, defaults to ``license.xml`` under *website_url*
    :type license_url: str, optional
    :param website_url: Root URL of the website, defaults to None
    :type website_url: str, optional
    :param template: If True, include example rules, custom directives and a sitemap,
    defaults to False
    :type template: bool, optional
    :param custom_directives: Extra lines to add to a template, defaults to ()
    :type custom_directives: Sequence[str], optional
    :raises ValueError: If neither *license_url* nor *website_url* are set.
    :rtype: str
    """
    if not (license_url or website_url):
        raise ValueError('Either license_url or website_url must be provided')
    license_url = license_url or license_url_for(website_url)

    if not template:
        return '\n'.join([f'License: {license_url}', '', 'User-agent: *', 'Disallow:'])

    lines = [
        '# robots.txt with RSL licensing information',
        f'License: {license_url}',
        '',
        '# Your existing robots.txt directives',
        'User-agent: *',
        '# Add your Disallow/Allow rules here',
        'Disallow: /admin/',
        'Disallow: /private/'
    ]
    if custom_directives:
        lines += ['', '# Custom directives', *custom_directives]
    if website_url:
        lines += ['', f'Sitemap: {website_url.rstrip("/")}/sitemap.xml']
    return '\n'.join(lines)

def validate_robots(
        contents: Iterable[Content],
        license_url: Optional[str] = None,
        website_url: Optional[str] = None
    ) -> ValidationReport:
    """
    Checks the arguments of ``robots_txt`` before it is called.

    :param contents: The contents the robots.txt refers to.
    :type contents: Iterable[Content]
    :param license_url: URL of the RSL document, defaults to None
    :type license_url: str, optional
    :param website_url: Root URL of the website, defaults to None
    :type website_url: str, optional
    :rtype: ValidationReport
    """
    results = []
    if not website_url:
        results.append(ValidationResult(
            Severity.WARNING, 'No website URL provided - robots.txt will have no Sitemap directive'))
    if not (license_url or website_url):
        results.append(ValidationResult(
            Severity.ERROR, 'Either license_url or website_url must be provided'))
    if not list(contents):
        results.append(ValidationResult(
            Severity.WARNING, 'No RSL content provided - robots.txt will only contain License directive'))
    return ValidationReport(results)

########
# HTML #
########

def html_head(
        contents: Optional[Iterable[Content]] = None,
        license_url: Optional[str] = None
    ) -> str:
    """
    Returns an HTML head element referring to an RSL document.
    If *license_url* is set the document is linked, otherwise
    the document built from *contents* is embedded in a script element.

    :param contents: Contents to embed, defaults to None
    :type contents: Iterable[Content], optional
    :param license_url: URL of the RSL document to link to, defaults to None
    :type license_url: str, optional
    :raises ValueError: If neither *contents* nor *license_url* are set.
    :rtype: str
    """
    if contents is None and not license_url:
        raise ValueError('Either contents or license_url must be provided')

    head = new_tag('head', can_be_empty = False)
    head.append(new_tag('meta', {'charset': 'UTF-8'}))
    if license_url:
        head.append(Comment('RSL License - Linked'))
        head.append(new_tag('link', {'rel': 'license', 'type': RSL_MIME_TYPE, 'href': license_url}))
        return render(head)

    head.append(Comment('RSL License - Embedded'))
    script = new_tag('script', {'type': RSL_MIME_TYPE}, can_be_empty = False)
    script.append(builder.document_tag(contents))
    head.append(script)
    return render(head)

#########
# Media #
#########

EPUB_NAMESPACES = {
    'xmlns': 'http://www.idpf.org/2007/opf',
    'xmlns:dc': 'http://purl.org/dc/elements/1.1/',
    'xmlns:rsl': RSL_NAMESPACE
}

XMP_NAMESPACES = {
    'xmlns:rdf': 'http://www.w3.org/1999/02/22-rdf-syntax-ns#',
    'xmlns:rsl': RSL_NAMESPACE
}

def _rsl_block(contents: Iterable[Content]) -> Tag:
    block = new_tag('rsl', prefix = PREFIX, can_be_empty = False)
    for content in contents:
        block.append(content_tag(content, PREFIX))
    return block

def media_metadata(contents: Iterable[Content], kind: str = 'epub') -> str:
    """
    Returns package metadata for a media file, carrying the licensing of *contents*.

    :param contents: The contents to embed, usually one per file.
    :type contents: Iterable[Content]
    :param kind: 'epub' for an OPF package document, 'image' for an XMP packet,
    defaults to 'epub'
    :type kind: str, optional
    :raises ValueError: If *kind* is not recognised.
    :rtype: str
    """
    if kind == 'epub':
        root = new_tag('package', {'version': '3.0'} | EPUB_NAMESPACES
            | {'unique-identifier': 'BookID'}, can_be_empty = False)
        metadata = new_tag('metadata', can_be_empty = False)
        metadata.append(_rsl_block(contents))
        root.append(metadata)

    elif kind == 'image':
        root = new_tag('xmpmeta', {'xmlns:x': 'adobe:ns:meta/'}, prefix = 'x', can_be_empty = False)
        rdf = new_tag('RDF', XMP_NAMESPACES, prefix = 'rdf', can_be_empty = False)
        description = new_tag('Description', prefix = 'rdf', can_be_empty = False)
        description.attrs['rdf:about'] = ''
        description.append(_rsl_block(contents))
        rdf.append(description)
        root.append(rdf)

    else:
        raise ValueError(f'Unknown media file kind: {kind!r}')

    return render(root)
