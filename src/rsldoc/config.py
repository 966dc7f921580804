"""
This module contains the configuration of the command-line tools.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from functools import cache
from typing import Optional

from rsldoc.licenses import ARCHETYPES, DEFAULT_CURRENCY
from rsldoc.validator import ValidationLevel

logger = logging.getLogger(__name__)

DEFAULT_PATH = 'rsldoc.json'
"""Config file read from the working directory when no other path is given."""


@dataclass
class RslConfig:
    """
    Holds the default values used when building and validating RSL documents.
    """
    default_currency: str = DEFAULT_CURRENCY
    """Currency of new licenses."""
    default_archetype: str = 'free'
    """Archetype of the licenses attached to crawled links."""
    validation_level: str = ValidationLevel.BASIC.value
    """Level of validation run before building a document."""
    fallback_url: Optional[str] = None
    """URL used for contents without one when parsing."""
    license_url: Optional[str] = None
    """Public URL of the RSL document, used by the embedding outputs."""

    def __post_init__(self) -> None:
        if self.default_archetype not in ARCHETYPES:
            raise ValueError(f'Unknown license type in config: {self.default_archetype!r}')
        try:
            ValidationLevel(self.validation_level)
        except ValueError:
            raise ValueError(f'Unknown validation level in config: {self.validation_level!r}')

    @classmethod
    def from_dict(cls, constructor: dict) -> RslConfig:
        """
        Instantiates this class from a dictionary, ignoring unknown keys.

        :param constructor: Constructor dict.
        :type constructor: dict
        :raises ValueError: If a value is invalid.
        :return: An instance of this class.
        :rtype: RslConfig
        """
        if not isinstance(constructor, dict):
            raise ValueError('Config must be a JSON object.')
        known = {field.name for field in fields(cls)}
        for key in constructor.keys() - known:
            logger.warning(f'Ignoring unknown config key: {key}')
        return cls(**{key: value for key, value in constructor.items() if key in known})

    @classmethod
    def from_file(cls, path: str) -> RslConfig:
        """
        Loads the config file at *path*.

        :param path: Path to a JSON config file.
        :type path: str
        :raises FileNotFoundError: If there is no file at *path*.
        :raises ValueError: If the file is not valid JSON, or has invalid values.
        :return: An instance of this class.
        :rtype: RslConfig
        """
        with open(path, 'r', encoding = 'utf-8') as stream:
            try:
                constructor = json.load(stream)
            except json.JSONDecodeError as err:
                raise ValueError(f'Failed to parse config file at {path}: {err}')
        return cls.from_dict(constructor)

    def to_dict(self) -> dict:
        return asdict(self)


@cache
def load_config(path: Optional[str] = None) -> RslConfig:
    """
    Loads the config file at *path*, or the default config file if it exists.
    Returns the default config if no file is given or found.

    :param path: Path to a JSON config file, defaults to None
    :type path: str, optional
    :raises FileNotFoundError: If *path* is set and there is no file there.
    :return: The config.
    :rtype: RslConfig
    """
    if path:
        return RslConfig.from_file(path)
    if os.path.exists(DEFAULT_PATH):
        logger.debug(f'Loading config from {os.path.abspath(DEFAULT_PATH)}')
        return RslConfig.from_file(DEFAULT_PATH)
    return RslConfig()
