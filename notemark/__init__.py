"""Notemark - list-aware note editing with PDF and ODT export."""

from .list_grammar import ListType, ParsedListLine, parse_list_line
from .model import CursorPosition, Paragraph, StyledRun, TextModel
from .renumber import ListRenumberer, change_list_indent

__all__ = [
    'CursorPosition',
    'ListRenumberer',
    'ListType',
    'Paragraph',
    'ParsedListLine',
    'StyledRun',
    'TextModel',
    'change_list_indent',
    'parse_list_line',
]
