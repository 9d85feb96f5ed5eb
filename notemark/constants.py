"""Constants and configuration for the notemark editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # List grammar
    INDENT_SPACES_PER_LEVEL = 2  # Leading spaces per nesting level
    BULLET_CHARACTERS = "-*+•◦▪‣"  # - * + • ◦ ▪ ‣
    LIST_PUNCTUATION = ".)"
    LIST_SPACING = " \t\xa0"  # Space, tab, non-breaking space

    # Fixed layout export (points, 72 per inch)
    DEFAULT_BODY_SIZE = 12  # Nominal body text size
    DEFAULT_MARGIN = 72  # One inch on every side
    LINE_SPACING_FACTOR = 1.4  # Line height relative to tallest font on the line
    PARAGRAPH_SPACING_FACTOR = 0.5  # Extra space after a paragraph, in line heights

    # Structured export
    ODT_MIMETYPE = "application/vnd.oasis.opendocument.text"
    ODT_VERSION = "1.2"

    # File operations
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Status messages
    NO_NUMBERS_MESSAGE = "No numbers in selection."
    SUM_MESSAGE = "Sum: {}"
