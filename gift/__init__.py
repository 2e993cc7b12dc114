"""GIFT interchange: export, parse and validate question banks as GIFT text."""

from gift.escaping import escape, unescape
from gift.exporter import export
from gift.parser import parse
from gift.paths import path_of, resolve_path
from gift.sanitizer import clean_html
from gift.validator import has_errors, validate

__all__ = [
    "clean_html",
    "escape",
    "export",
    "has_errors",
    "parse",
    "path_of",
    "resolve_path",
    "unescape",
    "validate",
]
