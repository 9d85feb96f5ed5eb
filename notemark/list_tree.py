"""Rebuild nested lists from a flat sequence of paragraphs.

The editor stores lists as literal text prefixes on ordinary paragraphs.
Structured export needs real nesting, so this module walks the paragraphs
once, strips each list prefix and hangs the remaining styled content on a
tree of list, list-item and paragraph nodes. Named list styles and
character styles are interned along the way so the serializer can define
each of them once.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from .list_grammar import ListType, ParsedListLine, parse_list_line
from .model import Paragraph, StyledRun


@dataclass
class SpanNode:
    text: str
    style_name: Optional[str] = None


@dataclass
class ParagraphNode:
    spans: List[SpanNode] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass
class ListItemNode:
    """A list item; paragraph is None for a placeholder that only nests a list."""
    paragraph: Optional[ParagraphNode] = None
    children: List["ListNode"] = field(default_factory=list)


@dataclass
class ListNode:
    style_name: str
    items: List[ListItemNode] = field(default_factory=list)


BlockNode = Union[ParagraphNode, ListNode]


@dataclass(frozen=True)
class ListLevelDefinition:
    """How one nesting depth of a list style draws its marker."""
    depth: int
    list_type: ListType
    uppercase_letters: bool
    bullet_symbol: Optional[str]
    punctuation: str
    spacing: str

    @property
    def num_format(self) -> str:
        if self.list_type is ListType.LETTERED:
            return "A" if self.uppercase_letters else "a"
        return "1"


@dataclass
class ListStyle:
    name: str
    levels: Dict[int, ListLevelDefinition] = field(default_factory=dict)


@dataclass(frozen=True)
class TextStyle:
    """A character style: body or monospace base with flags on top."""
    name: str
    monospaced: bool
    bold: bool
    italic: bool
    underline: bool
    strikethrough: bool


ListStyleKey = Tuple[ListType, bool, str, str, str]


class StyleRegistry:
    """Interns list and character styles for one export."""

    def __init__(self):
        self.list_styles: Dict[ListStyleKey, ListStyle] = {}
        self.text_styles: Dict[str, TextStyle] = {}

    def list_style_for(self, parsed: ParsedListLine, depth: int) -> str:
        """Name of the list style for a list line, defining its level on first use."""
        uppercase = parsed.is_uppercase_letter
        # Individual digits or letters never split a list
        marker_key = parsed.marker if parsed.list_type is ListType.BULLET else ""
        key = (parsed.list_type, uppercase, marker_key, parsed.punctuation, parsed.spacing)
        style = self.list_styles.get(key)
        if style is None:
            style = ListStyle(name=f"L{len(self.list_styles) + 1}")
            self.list_styles[key] = style
        if depth not in style.levels:
            style.levels[depth] = ListLevelDefinition(
                depth=depth,
                list_type=parsed.list_type,
                uppercase_letters=uppercase,
                bullet_symbol=parsed.bullet_symbol,
                punctuation=parsed.punctuation,
                spacing=parsed.spacing,
            )
        return style.name

    def text_style_for(self, run: StyledRun) -> Optional[str]:
        """Name of the character style for a run; None for plain body text."""
        flags = [
            name for name, active in (
                ("Bold", run.bold),
                ("Italic", run.italic),
                ("Underline", run.underline),
                ("Strike", run.strikethrough),
            ) if active
        ]
        if not flags and not run.monospaced:
            return None
        name = ("Mono" if run.monospaced else "Body") + "".join(flags)
        if name not in self.text_styles:
            self.text_styles[name] = TextStyle(
                name=name,
                monospaced=run.monospaced,
                bold=run.bold,
                italic=run.italic,
                underline=run.underline,
                strikethrough=run.strikethrough,
            )
        return name


@dataclass
class DocumentTree:
    body: List[BlockNode] = field(default_factory=list)
    list_styles: List[ListStyle] = field(default_factory=list)
    text_styles: List[TextStyle] = field(default_factory=list)


@dataclass
class _OpenList:
    """One open nesting depth while walking the paragraphs."""
    list_type: ListType
    uppercase_letters: bool
    bullet_symbol: Optional[str]
    style_name: str
    node: ListNode
    last_item: Optional[ListItemNode] = None

    def matches(self, parsed: ParsedListLine, style_name: str) -> bool:
        return (self.list_type is parsed.list_type
                and self.uppercase_letters == parsed.is_uppercase_letter
                and self.bullet_symbol == parsed.bullet_symbol
                and self.style_name == style_name)


def _paragraph_node(runs, registry: StyleRegistry) -> ParagraphNode:
    node = ParagraphNode()
    for run in runs:
        if not run.text:
            continue
        style_name = registry.text_style_for(run)
        if node.spans and node.spans[-1].style_name == style_name:
            node.spans[-1].text += run.text
        else:
            node.spans.append(SpanNode(run.text, style_name))
    return node


class ListTreeBuilder:
    """Single forward pass from flat paragraphs to a nested tree."""

    def __init__(self):
        self.registry = StyleRegistry()
        self.tree = DocumentTree()
        self._stack: List[_OpenList] = []

    def _open_list(self, parsed: ParsedListLine, style_name: str) -> _OpenList:
        node = ListNode(style_name)
        if self._stack:
            parent = self._stack[-1].last_item
            parent.children.append(node)
        else:
            self.tree.body.append(node)
        entry = _OpenList(
            list_type=parsed.list_type,
            uppercase_letters=parsed.is_uppercase_letter,
            bullet_symbol=parsed.bullet_symbol,
            style_name=style_name,
            node=node,
        )
        self._stack.append(entry)
        return entry

    def add_list_item(self, parsed: ParsedListLine, content: Paragraph) -> ListItemNode:
        depth = parsed.indent_level + 1
        # Close lists deeper than this line; they are never resumed
        del self._stack[depth:]

        style_name = self.registry.list_style_for(parsed, depth)
        if len(self._stack) == depth and not self._stack[-1].matches(parsed, style_name):
            self._stack.pop()

        while len(self._stack) < depth:
            entry = self._open_list(parsed, self.registry.list_style_for(parsed, len(self._stack) + 1))
            if len(self._stack) < depth:
                # Skipped level: an empty item to hang the deeper list on
                entry.last_item = ListItemNode()
                entry.node.items.append(entry.last_item)

        item = ListItemNode(paragraph=_paragraph_node(content.runs, self.registry))
        entry = self._stack[-1]
        entry.node.items.append(item)
        entry.last_item = item
        return item

    def add_paragraph(self, paragraph: Paragraph) -> None:
        parsed = parse_list_line(paragraph.text)
        if parsed is None:
            self._stack.clear()
            self.tree.body.append(_paragraph_node(paragraph.runs, self.registry))
            return
        _, content = paragraph.split_at(parsed.prefix_length)
        self.add_list_item(parsed, content)

    def finish(self) -> DocumentTree:
        self._stack.clear()
        self.tree.list_styles = list(self.registry.list_styles.values())
        self.tree.text_styles = list(self.registry.text_styles.values())
        return self.tree


def build_document_tree(paragraphs) -> DocumentTree:
    """Convert flat paragraphs into a tree of lists, items and paragraphs."""
    builder = ListTreeBuilder()
    for paragraph in paragraphs:
        builder.add_paragraph(paragraph)
    return builder.finish()
