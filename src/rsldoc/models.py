"""
Contains the data model of an RSL document: contents, licenses, and their metadata.

The classes in this module hold no behaviour beyond conversion to and from
the camelCase dictionaries exchanged with the dashboard and the persistence layer.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

#########
# Enums #
#########

class PermissionType(str, Enum):
    """The keys of a permits / prohibits block."""
    USAGE = 'usage'
    USER = 'user'
    GEO = 'geo'

class PaymentType(str, Enum):
    PURCHASE = 'purchase'
    SUBSCRIPTION = 'subscription'
    TRAINING = 'training'
    CRAWL = 'crawl'
    INFERENCE = 'inference'
    ATTRIBUTION = 'attribution'
    FREE = 'free'

class LegalType(str, Enum):
    WARRANTY = 'warranty'
    DISCLAIMER = 'disclaimer'

class CopyrightType(str, Enum):
    PERSON = 'person'
    ORGANIZATION = 'organization'


def value_of(item: Any) -> Any:
    """Returns the plain value of an Enum member, or *item* unchanged."""
    return item.value if isinstance(item, Enum) else item

def _compact(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Drops the keys of *mapping* whose value is None."""
    return {key: value for key, value in mapping.items() if value is not None}

###########
# License #
###########

@dataclass
class Permissions:
    """
    The usage, user, and geo tokens of a permits or prohibits block.
    Duplicates are kept as given.
    """
    usage: list[str] = field(default_factory = list)
    """Usage tokens, e.g. ``ai-train`` or ``search``."""
    user: list[str] = field(default_factory = list)
    """User class tokens, e.g. ``commercial`` or ``education``."""
    geo: list[str] = field(default_factory = list)
    """Country / region codes."""

    def __iter__(self):
        for key in PermissionType:
            yield key.value, getattr(self, key.value)

    @property
    def is_empty(self) -> bool:
        """True if none of the token lists have any entries."""
        return not (self.usage or self.user or self.geo)

    def to_dict(self) -> dict:
        return {key: list(tokens) for key, tokens in self}

    @classmethod
    def from_dict(cls, constructor: Optional[Mapping]) -> Permissions:
        constructor = constructor or {}
        return cls(**{
            key.value: list(constructor.get(key.value) or [])
            for key in PermissionType
        })


@dataclass
class Payment:
    """
    The payment terms of a license.
    """
    type: str = PaymentType.FREE.value
    """One of the values of PaymentType."""
    standard_urls: list[str] = field(default_factory = list)
    """URLs of standard pricing terms, in order."""
    custom_url: Optional[str] = None
    """URL of custom pricing terms."""
    amount: Optional[str] = None
    """Decimal amount, as a string."""
    currency: Optional[str] = None
    """ISO 4217 style currency code."""

    def to_dict(self) -> dict:
        return _compact({
            'type': value_of(self.type),
            'standardUrls': list(self.standard_urls),
            'customUrl': self.custom_url,
            'amount': self.amount,
            'currency': self.currency
        })

    @classmethod
    def from_dict(cls, constructor: Mapping) -> Payment:
        return cls(
            type = value_of(constructor.get('type')) or PaymentType.FREE.value,
            standard_urls = list(constructor.get('standardUrls') or []),
            custom_url = constructor.get('customUrl') or None,
            amount = constructor.get('amount') or None,
            currency = constructor.get('currency') or None
        )


@dataclass
class LegalTerms:
    """
    A warranty or disclaimer attached to a license.
    """
    type: str
    """One of the values of LegalType."""
    terms: list[str] = field(default_factory = list)

    def to_dict(self) -> dict:
        return {'type': value_of(self.type), 'terms': list(self.terms)}

    @classmethod
    def from_dict(cls, constructor: Mapping) -> LegalTerms:
        return cls(
            value_of(constructor['type']),
            list(constructor.get('terms') or [])
        )


@dataclass
class License:
    """
    A bundle of usage rights attachable to a Content.
    """
    id: str
    """Identifier unique within the document."""
    name: Optional[str] = None
    """Human readable label."""
    permits: Optional[Permissions] = None
    prohibits: Optional[Permissions] = None
    payment: Optional[Payment] = None
    legal: list[LegalTerms] = field(default_factory = list)

    @property
    def declares_rights(self) -> bool:
        """
        False if this license has no permits and no prohibits.
        """
        return not (
            (self.permits is None or self.permits.is_empty) and
            (self.prohibits is None or self.prohibits.is_empty)
        )

    def to_dict(self) -> dict:
        return _compact({
            'id': self.id,
            'name': self.name,
            'permits': self.permits.to_dict() if self.permits else None,
            'prohibits': self.prohibits.to_dict() if self.prohibits else None,
            'payment': self.payment.to_dict() if self.payment else None,
            'legal': [legal.to_dict() for legal in self.legal]
        })

    @classmethod
    def from_dict(cls, constructor: Mapping) -> License:
        return cls(
            id = constructor.get('id') or '',
            name = constructor.get('name'),
            permits = Permissions.from_dict(constructor['permits'])
                if constructor.get('permits') is not None else None,
            prohibits = Permissions.from_dict(constructor['prohibits'])
                if constructor.get('prohibits') is not None else None,
            payment = Payment.from_dict(constructor['payment'])
                if constructor.get('payment') is not None else None,
            legal = [LegalTerms.from_dict(legal) for legal in constructor.get('legal') or []]
        )

###########
# Content #
###########

@dataclass
class Metadata:
    """
    Descriptive and legal information about a Content.
    Unset values are omitted from the serialised document.
    """
    schema_url: Optional[str] = None
    copyright_holder: Optional[str] = None
    copyright_type: Optional[str] = None
    """One of the values of CopyrightType."""
    contact_email: Optional[str] = None
    contact_url: Optional[str] = None
    terms_url: Optional[str] = None

    _KEYS = {
        'schema_url': 'schemaUrl',
        'copyright_holder': 'copyrightHolder',
        'copyright_type': 'copyrightType',
        'contact_email': 'contactEmail',
        'contact_url': 'contactUrl',
        'terms_url': 'termsUrl'
    }
    """Maps attribute names to their key in dictionary form."""

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, attr) for attr in self._KEYS)

    @property
    def has_copyright(self) -> bool:
        """True if any of the values serialised in the copyright element are set."""
        return bool(
            self.copyright_holder or self.copyright_type or
            self.contact_email or self.contact_url
        )

    def to_dict(self) -> dict:
        return _compact({
            key: value_of(getattr(self, attr)) for attr, key in self._KEYS.items()
        })

    @classmethod
    def from_dict(cls, constructor: Mapping) -> Metadata:
        return cls(**{
            attr: value_of(constructor.get(key)) or None for attr, key in cls._KEYS.items()
        })


@dataclass
class RslData:
    """
    The licensing data of one Content.
    """
    license_server: Optional[str] = None
    """URL of a server issuing licenses dynamically."""
    encrypted: bool = False
    last_modified: Optional[str] = None
    licenses: list[License] = field(default_factory = list)
    metadata: Optional[Metadata] = None

    def to_dict(self) -> dict:
        return _compact({
            'licenseServer': self.license_server,
            'encrypted': self.encrypted,
            'lastModified': self.last_modified,
            'licenses': [license.to_dict() for license in self.licenses],
            'metadata': self.metadata.to_dict() if self.metadata else None
        })

    @classmethod
    def from_dict(cls, constructor: Mapping) -> RslData:
        return cls(
            license_server = constructor.get('licenseServer') or None,
            encrypted = bool(constructor.get('encrypted')),
            last_modified = constructor.get('lastModified') or None,
            licenses = [License.from_dict(lic) for lic in constructor.get('licenses') or []],
            metadata = Metadata.from_dict(constructor['metadata'])
                if constructor.get('metadata') is not None else None
        )


@dataclass
class Content:
    """
    One URL scoped unit that licenses are attached to.
    """
    url: str
    rsl: RslData = field(default_factory = RslData)

    @property
    def licenses(self) -> list[License]:
        return self.rsl.licenses

    def to_dict(self) -> dict:
        return {'url': self.url, 'rsl': self.rsl.to_dict()}

    @classmethod
    def from_dict(cls, constructor: Mapping) -> Content:
        """
        Instantiates a Content from its dictionary form.
        Both the nested form (``{url, rsl: {...}}``) and the flat editable form
        (``{url, licenseServer, licenses, ...}``) are accepted.

        :param constructor: Constructor dict.
        :type constructor: Mapping
        :return: A Content.
        :rtype: Content
        """
        rsl = constructor.get('rsl')
        if rsl is None:
            rsl = {key: value for key, value in constructor.items() if key != 'url'}
        return cls(constructor.get('url') or '', RslData.from_dict(rsl))


def contents_to_list(contents: Iterable[Content]) -> list[dict]:
    return [content.to_dict() for content in contents]

def contents_from_list(constructor: Iterable[Mapping]) -> list[Content]:
    """
    Instantiates a list of Content from a list of dictionaries.

    :param constructor: Some dictionaries, as returned by ``contents_to_list``.
    :type constructor: Iterable[Mapping]
    :raises TypeError: If an item is not a mapping.
    :return: A list of Content, in the same order.
    :rtype: list[Content]
    """
    contents = []
    for index, item in enumerate(constructor):
        if not isinstance(item, Mapping):
            raise TypeError(f'Content at index {index} is not an object: {item!r}')
        contents.append(Content.from_dict(item))
    return contents
