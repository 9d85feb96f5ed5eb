"""OpenDocument Text serialization of the reconstructed list tree.

The tree from list_tree is rendered with lxml into the three XML parts of
an .odt package (content, styles and manifest) and zipped with the
uncompressed mimetype entry first, as the format requires.
"""

import io
import logging
import zipfile
from typing import Iterable, List, Optional

from lxml import etree

from .constants import EditorConstants
from .file_io import save_atomically
from .list_tree import (
    DocumentTree,
    ListLevelDefinition,
    ListNode,
    ListStyle,
    ParagraphNode,
    TextStyle,
    build_document_tree,
)
from .list_grammar import ListType
from .model import Paragraph

logger = logging.getLogger(__name__)

ODF_NAMESPACES = {
    "office": "urn:oasis:names:tc:opendocument:xmlns:office:1.0",
    "style": "urn:oasis:names:tc:opendocument:xmlns:style:1.0",
    "text": "urn:oasis:names:tc:opendocument:xmlns:text:1.0",
    "fo": "urn:oasis:names:tc:opendocument:xmlns:xsl-fo-compatible:1.0",
    "svg": "urn:oasis:names:tc:opendocument:xmlns:svg-compatible:1.0",
}
MANIFEST_NS = "urn:oasis:names:tc:opendocument:xmlns:manifest:1.0"

BODY_FONT = "Liberation Serif"
MONO_FONT = "Liberation Mono"
PARAGRAPH_STYLE = "Standard"
LIST_INDENT_INCHES = 0.25


def _qn(tag: str) -> str:
    """Qualified name for a prefixed tag such as 'text:p'."""
    prefix, local = tag.split(":")
    return f"{{{ODF_NAMESPACES[prefix]}}}{local}"


def _el(parent, tag: str, **attrs) -> etree._Element:
    element = etree.SubElement(parent, _qn(tag))
    for key, value in attrs.items():
        element.set(_qn(key.replace("_", ":", 1).replace("_", "-")), str(value))
    return element


def _font_face_decls(root) -> None:
    decls = _el(root, "office:font-face-decls")
    for name, pitch in ((BODY_FONT, "variable"), (MONO_FONT, "fixed")):
        _el(decls, "style:font-face", style_name=name, svg_font_family=f"'{name}'",
            style_font_pitch=pitch)


class _TextEmitter:
    """Writes text into a paragraph, encoding whitespace the ODF way.

    Runs of spaces after the first, and spaces at the start of the
    paragraph, become <text:s/>; tabs and newlines become elements. The
    emitter spans the whole paragraph so a space run that continues one
    from the previous span is still encoded.
    """

    def __init__(self):
        self.started = False
        self.after_literal_space = False

    @staticmethod
    def _append_string(parent, s: str) -> None:
        if len(parent):
            parent[-1].tail = (parent[-1].tail or "") + s
        else:
            parent.text = (parent.text or "") + s

    def write(self, parent, text: str) -> None:
        i = 0
        while i < len(text):
            ch = text[i]
            if ch == "\t":
                _el(parent, "text:tab")
                self.after_literal_space = False
                i += 1
            elif ch == "\n":
                _el(parent, "text:line-break")
                self.after_literal_space = False
                i += 1
            elif ch == " ":
                j = i
                while j < len(text) and text[j] == " ":
                    j += 1
                count = j - i
                if self.started and not self.after_literal_space:
                    self._append_string(parent, " ")
                    count -= 1
                    self.after_literal_space = True
                if count > 1:
                    _el(parent, "text:s", text_c=count)
                elif count:
                    _el(parent, "text:s")
                if count:
                    self.after_literal_space = False
                i = j
            else:
                j = i
                while j < len(text) and text[j] not in " \t\n":
                    j += 1
                self._append_string(parent, text[i:j])
                self.after_literal_space = False
                i = j
            self.started = True


def _write_paragraph(parent, node: Optional[ParagraphNode]) -> None:
    p = _el(parent, "text:p", text_style_name=PARAGRAPH_STYLE)
    if node is None:
        return
    emitter = _TextEmitter()
    for span in node.spans:
        target = p if span.style_name is None else _el(p, "text:span", text_style_name=span.style_name)
        emitter.write(target, span.text)


def _write_list(parent, node: ListNode) -> None:
    lst = _el(parent, "text:list", text_style_name=node.style_name)
    for item in node.items:
        li = _el(lst, "text:list-item")
        if item.paragraph is not None:
            _write_paragraph(li, item.paragraph)
        for child in item.children:
            _write_list(li, child)


def _write_list_level(list_style, level: ListLevelDefinition) -> None:
    if level.list_type is ListType.BULLET:
        el = _el(list_style, "text:list-level-style-bullet", text_level=level.depth,
                 text_bullet_char=level.bullet_symbol)
    else:
        el = _el(list_style, "text:list-level-style-number", text_level=level.depth,
                 style_num_format=level.num_format)
        if level.punctuation:
            el.set(_qn("style:num-suffix"), level.punctuation)
    props = _el(el, "style:list-level-properties")
    props.set(_qn("text:list-level-position-and-space-mode"), "label-alignment")
    align = _el(props, "style:list-level-label-alignment")
    align.set(_qn("text:label-followed-by"), "listtab" if "\t" in level.spacing else "space")
    align.set(_qn("fo:text-indent"), f"-{LIST_INDENT_INCHES}in")
    align.set(_qn("fo:margin-left"), f"{LIST_INDENT_INCHES * (level.depth + 1):g}in")


def _write_list_style(parent, style: ListStyle) -> None:
    el = _el(parent, "text:list-style", style_name=style.name)
    for depth in sorted(style.levels):
        _write_list_level(el, style.levels[depth])


def _write_text_style(parent, style: TextStyle) -> None:
    el = _el(parent, "style:style", style_name=style.name, style_family="text")
    props = _el(el, "style:text-properties")
    if style.monospaced:
        props.set(_qn("style:font-name"), MONO_FONT)
    if style.bold:
        props.set(_qn("fo:font-weight"), "bold")
    if style.italic:
        props.set(_qn("fo:font-style"), "italic")
    if style.underline:
        props.set(_qn("style:text-underline-style"), "solid")
        props.set(_qn("style:text-underline-width"), "auto")
        props.set(_qn("style:text-underline-color"), "font-color")
    if style.strikethrough:
        props.set(_qn("style:text-line-through-style"), "solid")


def render_content(tree: DocumentTree) -> etree._Element:
    root = etree.Element(_qn("office:document-content"), nsmap=ODF_NAMESPACES)
    root.set(_qn("office:version"), EditorConstants.ODT_VERSION)
    _font_face_decls(root)

    automatic = _el(root, "office:automatic-styles")
    for list_style in tree.list_styles:
        _write_list_style(automatic, list_style)
    for text_style in tree.text_styles:
        _write_text_style(automatic, text_style)

    body = _el(_el(root, "office:body"), "office:text")
    for block in tree.body:
        if isinstance(block, ListNode):
            _write_list(body, block)
        else:
            _write_paragraph(body, block)
    return root


def render_styles() -> etree._Element:
    root = etree.Element(_qn("office:document-styles"), nsmap=ODF_NAMESPACES)
    root.set(_qn("office:version"), EditorConstants.ODT_VERSION)
    _font_face_decls(root)

    styles = _el(root, "office:styles")
    default = _el(styles, "style:default-style", style_family="paragraph")
    props = _el(default, "style:text-properties")
    props.set(_qn("style:font-name"), BODY_FONT)
    props.set(_qn("fo:font-size"), f"{EditorConstants.DEFAULT_BODY_SIZE}pt")
    _el(styles, "style:style", style_name=PARAGRAPH_STYLE, style_family="paragraph")

    automatic = _el(root, "office:automatic-styles")
    layout = _el(automatic, "style:page-layout", style_name="pm1")
    page = _el(layout, "style:page-layout-properties")
    margin = f"{EditorConstants.DEFAULT_MARGIN / 72:g}in"
    for attr, value in (("fo:page-width", "8.5in"), ("fo:page-height", "11in"),
                        ("fo:margin-top", margin), ("fo:margin-bottom", margin),
                        ("fo:margin-left", margin), ("fo:margin-right", margin)):
        page.set(_qn(attr), value)

    master = _el(root, "office:master-styles")
    _el(master, "style:master-page", style_name=PARAGRAPH_STYLE, style_page_layout_name="pm1")
    return root


def render_manifest() -> etree._Element:
    m = f"{{{MANIFEST_NS}}}"
    root = etree.Element(f"{m}manifest", nsmap={"manifest": MANIFEST_NS})
    root.set(f"{m}version", EditorConstants.ODT_VERSION)
    entries = (
        ("/", EditorConstants.ODT_MIMETYPE),
        ("content.xml", "text/xml"),
        ("styles.xml", "text/xml"),
    )
    for path, media_type in entries:
        entry = etree.SubElement(root, f"{m}file-entry")
        entry.set(f"{m}full-path", path)
        entry.set(f"{m}media-type", media_type)
        if path == "/":
            entry.set(f"{m}version", EditorConstants.ODT_VERSION)
    return root


def _to_bytes(root: etree._Element) -> bytes:
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8")


def build_odt_package(paragraphs: Iterable[Paragraph]) -> bytes:
    """Serialize paragraphs to the bytes of an .odt file."""
    tree = build_document_tree(paragraphs)
    parts = [
        ("content.xml", _to_bytes(render_content(tree))),
        ("styles.xml", _to_bytes(render_styles())),
        ("META-INF/manifest.xml", _to_bytes(render_manifest())),
    ]
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        # mimetype must be first and stored uncompressed
        archive.writestr(zipfile.ZipInfo("mimetype"), EditorConstants.ODT_MIMETYPE,
                         compress_type=zipfile.ZIP_STORED)
        for name, data in parts:
            archive.writestr(name, data, compress_type=zipfile.ZIP_DEFLATED)
    return buffer.getvalue()


def write_odt(paragraphs: Iterable[Paragraph], path: str) -> bool:
    """Write paragraphs to an .odt file.

    If the package cannot be built or written, the document is written to
    path as unformatted plain text instead.

    Returns:
        True if the OpenDocument file was written, False on fallback.
    """
    paragraphs: List[Paragraph] = list(paragraphs)
    try:
        save_atomically(path, build_odt_package(paragraphs))
        return True
    except (OSError, ValueError, etree.LxmlError, zipfile.BadZipFile) as e:
        logger.warning(f"Could not write OpenDocument file {path}: {e}; saving plain text instead")

    with open(path, "w", encoding="utf-8") as f:
        f.write("\n".join(p.text for p in paragraphs))
    return False
