"""
rsldoc builds, parses and validates RSL (Really Simple Licensing) documents.
This package contains the document model and the functions used by the dashboard and the command-line tools.
"""
from .models import Content, License, Metadata, RslData
from .licenses import create_license, UnknownLicenseType
from .builder import build_document
from .parser import parse_document
from .validator import validate, ValidationLevel, ValidationReport
