"""
Error taxonomy for catalog ingestion and the assistant session.

Row-level problems during ingestion are absorbed by the builder; only the
whole-import failures below reach the caller. An unpriced value is a normal
data state (`None` base price), not an error.
"""
from __future__ import annotations


class CatalogError(Exception):
    """Base class for every error raised by this project."""


class ParseError(CatalogError):
    """The uploaded spreadsheet is in an unsupported format or could not be read."""


class EmptyCatalogError(CatalogError):
    """The spreadsheet produced no usable rows."""


class UpstreamUnavailable(CatalogError):
    """The language model call failed, timed out or returned no content."""


class ConfigurationMissing(CatalogError):
    """A credential required for the language model call is not configured."""


class SessionBusy(CatalogError):
    """A message was sent while another request is still in flight."""
