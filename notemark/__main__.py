"""Notemark CLI entry point.

Allows running via `python -m notemark` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .version import get_version_string

USAGE = """usage: notemark [--version] [FILE]
       notemark export INPUT [--pdf OUT] [--odt OUT] [--renumber] [--verbose]
       notemark settings FILE [--page-size letter|a4] [--margin PT] [--body-size PT] [--font NAME]"""


def run_export(args: list[str]) -> int:
    """Export a .rtf or plain text file to PDF and/or ODT.

    Returns:
        Process exit status.
    """
    from .export import ExportError, export_odt, export_pdf, renumber_paragraphs
    from .file_io import load_document
    from .pdf_generator import FontLoadError
    from .settings_persistence import get_persistence

    input_path = None
    pdf_path = odt_path = None
    renumber = verbose = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--pdf", "--odt"):
            if i + 1 >= len(args):
                print(f"{arg} needs an output path", file=sys.stderr)
                return 2
            if arg == "--pdf":
                pdf_path = args[i + 1]
            else:
                odt_path = args[i + 1]
            i += 2
            continue
        if arg == "--renumber":
            renumber = True
        elif arg in ("--verbose", "-v"):
            verbose = True
        elif arg.startswith("-") or input_path is not None:
            print(USAGE, file=sys.stderr)
            return 2
        else:
            input_path = arg
        i += 1

    if input_path is None:
        print(USAGE, file=sys.stderr)
        return 2

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if pdf_path is None and odt_path is None:
        pdf_path = str(Path(input_path).with_suffix(".pdf"))

    try:
        paragraphs = load_document(input_path)
    except OSError as e:
        print(f"Could not read {input_path}: {e}", file=sys.stderr)
        return 1
    if renumber:
        paragraphs = renumber_paragraphs(paragraphs)

    status = 0
    if pdf_path:
        settings = get_persistence().page_settings_for(input_path)
        try:
            warning = export_pdf(paragraphs, pdf_path, settings, title=Path(input_path).stem)
        except (ExportError, FontLoadError) as e:
            print(str(e), file=sys.stderr)
            status = 1
        else:
            if warning:
                print(warning, file=sys.stderr)
    if odt_path:
        try:
            if not export_odt(paragraphs, odt_path):
                print(f"Wrote {odt_path} as plain text", file=sys.stderr)
        except OSError as e:
            print(f"Could not write {odt_path}: {e}", file=sys.stderr)
            status = 1
    return status


_SETTING_OPTIONS = {
    "--page-size": ("page_size", str),
    "--margin": ("margin", float),
    "--body-size": ("body_size", float),
    "--font": ("font_family", str),
}


def run_settings(args: list[str]) -> int:
    """Show or update the export settings stored for a document.

    Returns:
        Process exit status.
    """
    from .settings_persistence import get_persistence

    if not args or args[0].startswith("-"):
        print(USAGE, file=sys.stderr)
        return 2
    document, options = args[0], args[1:]
    persistence = get_persistence()
    settings = persistence.load_settings(document)

    updates = {}
    i = 0
    while i < len(options):
        if options[i] not in _SETTING_OPTIONS or i + 1 >= len(options):
            print(USAGE, file=sys.stderr)
            return 2
        key, convert = _SETTING_OPTIONS[options[i]]
        try:
            value = convert(options[i + 1])
        except ValueError:
            value = options[i + 1]
        if not persistence.validate_setting(key, value):
            print(f"Invalid value for {options[i]}: {options[i + 1]}", file=sys.stderr)
            return 2
        updates[key] = value
        i += 2

    if updates:
        settings.update(updates)
        if not persistence.save_settings(document, settings):
            print("Could not save settings", file=sys.stderr)
            return 1
    for key in sorted(settings):
        print(f"{key} = {settings[key]}")
    return 0


def main() -> None:
    # Very small arg parsing: version, export and settings subcommands, optional filename
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    if args and args[0] in ("--help", "-h"):
        print(USAGE)
        return
    if args and args[0] == "export":
        sys.exit(run_export(args[1:]))
    if args and args[0] == "settings":
        sys.exit(run_settings(args[1:]))

    logging.basicConfig(level=logging.WARNING)
    # Lazy import to avoid importing UI deps for --version and export
    from .textual_app import main as run_editor
    run_editor(args[0] if args else None)


if __name__ == "__main__":  # pragma: no cover
    main()
