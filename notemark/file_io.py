"""Loading documents and writing files atomically."""

import os
import tempfile
from typing import List, Union

from .model import Paragraph
from .rtf_parser import parse_rtf


def save_atomically(filename: str, data: Union[str, bytes]) -> None:
    """Write data to filename via a temporary file and a rename.

    Raises:
        OSError: If the file cannot be written; the temporary file is removed.
    """
    # Same directory so the rename stays on one filesystem
    dir_name = os.path.dirname(filename) or '.'
    suffix = os.path.splitext(filename)[1]
    if isinstance(data, str):
        data = data.encode('utf-8')

    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='wb', dir=dir_name, suffix=suffix,
                                         delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(data)
            temp_file.flush()
            os.fsync(temp_file.fileno())  # Ensure data is written to disk
        os.replace(temp_filename, filename)
    except OSError:
        if temp_filename and os.path.exists(temp_filename):
            try:
                os.remove(temp_filename)
            except OSError:
                pass
        raise


def load_document(filename: str) -> List[Paragraph]:
    """Read a document as styled paragraphs.

    .rtf files go through the RTF parser; anything else is read as UTF-8
    plain text with one paragraph per line.
    """
    with open(filename, 'r', encoding='utf-8', errors='replace') as f:
        content = f.read()
    if filename.lower().endswith('.rtf'):
        return parse_rtf(content)
    if content.endswith('\n'):
        content = content[:-1]
    return [Paragraph.from_text(line) for line in content.replace('\r\n', '\n').split('\n')]
