"""Export commands: PDF through the layout engine, ODT through the list tree."""

import logging
from typing import Iterable, List, Optional

from .file_io import save_atomically
from .font_config import PageSettings
from .layout import layout_document
from .model import Paragraph, TextModel
from .odt_writer import write_odt
from .pdf_generator import PDFGenerator
from .renumber import ListRenumberer

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Raised when an export cannot be written."""


def renumber_paragraphs(paragraphs: Iterable[Paragraph]) -> List[Paragraph]:
    """Run one renumbering pass over a document snapshot."""
    model = TextModel.from_paragraphs(paragraphs)
    ListRenumberer().renumber(model)
    return model.to_paragraphs()


def export_pdf(paragraphs: Iterable[Paragraph], path: str,
               settings: Optional[PageSettings] = None,
               title: Optional[str] = None) -> Optional[str]:
    """Lay out paragraphs and write them to a PDF file.

    Returns:
        A warning about characters the PDF fonts cannot show, or None.

    Raises:
        ExportError: If the file cannot be written.
        FontLoadError: If a configured face cannot be loaded.
    """
    settings = settings or PageSettings()
    pages = layout_document(paragraphs, settings)
    generator = PDFGenerator(settings, title=title)
    pdf_bytes = generator.generate_pdf(pages)
    try:
        save_atomically(path, pdf_bytes)
    except OSError as e:
        raise ExportError(f"Could not write PDF to {path}: {e}") from e

    logger.info(f"Wrote {len(pages)} page(s) to {path}")
    warning = generator.get_unprintable_warning()
    if warning:
        logger.warning(warning)
    return warning


def export_odt(paragraphs: Iterable[Paragraph], path: str) -> bool:
    """Write paragraphs as OpenDocument Text.

    Returns:
        True for an .odt file, False if plain text was written instead.
    """
    written = write_odt(paragraphs, path)
    if written:
        logger.info(f"Wrote OpenDocument file {path}")
    return written
