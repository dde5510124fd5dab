"""
themelens Language Server implementation using pygls.

Serves theme completion, hover, inlay hints and document colors for
JavaScript/TypeScript files, backed by a ``ThemeWorkspace``.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from lsprotocol.types import (
    INITIALIZE,
    TEXT_DOCUMENT_COLOR_PRESENTATION,
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_SAVE,
    TEXT_DOCUMENT_DOCUMENT_COLOR,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_INLAY_HINT,
    Color,
    ColorInformation,
    ColorPresentation,
    ColorPresentationParams,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    DidSaveTextDocumentParams,
    DocumentColorParams,
    Hover,
    HoverParams,
    InitializeParams,
    InlayHint,
    InlayHintKind,
    InlayHintParams,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
)
from pygls.lsp.server import LanguageServer
from pygls.uris import to_fs_path
from pygls.workspace import TextDocument

from themelens import __version__
from themelens.core.colors import RGBA, parse_color, to_css, to_hex
from themelens.core.errors import ThemeLensError
from themelens.core.queries import (
    HoverResult,
    color_references,
    complete_alias_at,
    complete_at,
    hover_at,
    inlay_hints,
)
from themelens.core.syntax import SourceFile, parse_source
from themelens.core.values import (
    ListValue,
    ObjectValue,
    StringValue,
    UnresolvedValue,
    Value,
    preview,
)
from themelens.workspace import ThemeWorkspace

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create server instance
server = LanguageServer("themelens-lsp", __version__)

# Store workspace state on server
server.theme_workspace: Optional[ThemeWorkspace] = None

HOVER_CHILD_LIMIT = 12


@server.feature(INITIALIZE)
def initialize(ls: LanguageServer, params: InitializeParams):
    """Initialize the language server."""
    root = params.root_uri and to_fs_path(params.root_uri)
    if not root:
        logger.warning("No workspace root, theme features disabled")
        return
    try:
        ls.theme_workspace = ThemeWorkspace(Path(root))
    except ThemeLensError as e:
        logger.error(f"Failed to load workspace configuration: {e}")
        ls.theme_workspace = None
        return
    logger.info(f"Workspace root: {ls.theme_workspace.root}")
    _load_theme(ls)


def _load_theme(ls: LanguageServer) -> None:
    """(Re)load the theme, keeping the server alive on configuration errors."""
    workspace = ls.theme_workspace
    if workspace is None:
        return
    try:
        workspace.refresh()
    except ThemeLensError as e:
        logger.error(f"Failed to load theme: {e}")


@server.feature(TEXT_DOCUMENT_DID_SAVE)
def did_save(ls: LanguageServer, params: DidSaveTextDocumentParams):
    """Refresh the theme when a file it depends on is saved."""
    workspace = ls.theme_workspace
    path = to_fs_path(params.text_document.uri)
    if workspace is None or path is None:
        return
    try:
        related = workspace.is_theme_file(Path(path))
    except ThemeLensError as e:
        logger.error(f"Cannot read theme configuration: {e}")
        return
    if related:
        logger.info(f"Theme source saved: {path}")
        _load_theme(ls)


def _source(ls: LanguageServer, uri: str) -> Tuple[SourceFile, TextDocument]:
    document = ls.workspace.get_text_document(uri)
    return parse_source(document.source, document.path), document


def _offset(source: SourceFile, document: TextDocument, position: Position) -> int:
    # client units follow the negotiated encoding, SourceFile columns count code points
    client = Position(line=position.line, character=position.character)
    server_position = document.position_codec.position_from_client_units(document.lines, client)
    return source.offset_at(server_position.line, server_position.character)


def _position(source: SourceFile, document: TextDocument, offset: int) -> Position:
    line, column = source.position_at(offset)
    return document.position_codec.position_to_client_units(
        document.lines, Position(line=line, character=column)
    )


def _range(source: SourceFile, document: TextDocument, start: int, end: int) -> Range:
    return Range(
        start=_position(source, document, start), end=_position(source, document, end)
    )


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: LanguageServer, params: HoverParams) -> Optional[Hover]:
    """Show the resolved theme value under the cursor."""
    workspace = ls.theme_workspace
    document = workspace.document if workspace else None
    if document is None:
        return None

    source, text_document = _source(ls, params.text_document.uri)
    offset = _offset(source, text_document, params.position)
    result = hover_at(document, source, offset, workspace.options)
    if result is None:
        return None
    return Hover(
        contents=MarkupContent(kind=MarkupKind.Markdown, value=format_hover(result)),
        range=_range(source, text_document, result.start, result.end),
    )


@server.feature(
    TEXT_DOCUMENT_COMPLETION,
    CompletionOptions(trigger_characters=["."]),
)
def completion(ls: LanguageServer, params: CompletionParams) -> Optional[CompletionList]:
    """Complete theme paths and legacy theme alias keys."""
    workspace = ls.theme_workspace
    if workspace is None:
        return None

    source, text_document = _source(ls, params.text_document.uri)
    offset = _offset(source, text_document, params.position)
    items: List[CompletionItem] = []

    document = workspace.document
    if document is not None:
        result = complete_at(document, source, offset, workspace.options)
        if result is not None:
            for suggestion in result.suggestions:
                items.append(
                    CompletionItem(
                        label=suggestion.name,
                        kind=_completion_kind(suggestion.value),
                        detail=suggestion.preview,
                        documentation=_color_documentation(suggestion.value),
                    )
                )

    if workspace.legacy_themes:
        aliased = complete_alias_at(workspace.legacy_themes, source, offset)
        if aliased is not None:
            for key, value in aliased.keys:
                items.append(
                    CompletionItem(
                        label=key,
                        kind=CompletionItemKind.Property,
                        detail=f"{aliased.alias}: {preview(value)}",
                    )
                )

    if not items:
        return None
    return CompletionList(is_incomplete=False, items=items)


@server.feature(TEXT_DOCUMENT_INLAY_HINT)
def inlay_hint(ls: LanguageServer, params: InlayHintParams) -> List[InlayHint]:
    """``: value`` after each theme access in the requested range."""
    workspace = ls.theme_workspace
    document = workspace.document if workspace else None
    if document is None:
        return []

    source, text_document = _source(ls, params.text_document.uri)
    first_line = params.range.start.line
    last_line = params.range.end.line
    hints: List[InlayHint] = []
    for hint in inlay_hints(document, source, workspace.options):
        position = _position(source, text_document, hint.offset)
        if first_line <= position.line <= last_line:
            hints.append(
                InlayHint(
                    position=position,
                    label=hint.label,
                    kind=InlayHintKind.Type,
                    padding_left=False,
                )
            )
    return hints


@server.feature(TEXT_DOCUMENT_DOCUMENT_COLOR)
def document_color(ls: LanguageServer, params: DocumentColorParams) -> List[ColorInformation]:
    """Color swatches for theme accesses that hold CSS colors."""
    workspace = ls.theme_workspace
    document = workspace.document if workspace else None
    if document is None:
        return []

    source, text_document = _source(ls, params.text_document.uri)
    found: List[ColorInformation] = []
    for ref in color_references(document, source, workspace.options):
        red, green, blue, alpha = ref.color.as_floats()
        found.append(
            ColorInformation(
                range=_range(source, text_document, ref.start, ref.end),
                color=Color(red=red, green=green, blue=blue, alpha=alpha),
            )
        )
    return found


@server.feature(TEXT_DOCUMENT_COLOR_PRESENTATION)
def color_presentation(
    ls: LanguageServer, params: ColorPresentationParams
) -> List[ColorPresentation]:
    """Hex and rgb() renderings of a picked color."""
    color = RGBA(
        round(params.color.red * 255),
        round(params.color.green * 255),
        round(params.color.blue * 255),
        round(params.color.alpha, 3),
    )
    return [ColorPresentation(label=to_hex(color)), ColorPresentation(label=to_css(color))]


# Helper functions


def _completion_kind(value: Value) -> CompletionItemKind:
    if isinstance(value, ObjectValue):
        return CompletionItemKind.Module
    if isinstance(value, StringValue) and parse_color(value.value) is not None:
        return CompletionItemKind.Color
    if isinstance(value, UnresolvedValue):
        return CompletionItemKind.Function
    return CompletionItemKind.Value


def _color_documentation(value: Value) -> Optional[str]:
    # VS Code renders a swatch for Color items whose documentation is a hex string
    if isinstance(value, StringValue):
        color = parse_color(value.value)
        if color is not None:
            return to_hex(color)
    return None


def format_hover(result: HoverResult) -> str:
    """Markdown for a hover: path, value, type and color details."""
    value = result.value
    lines = [f"**theme.{'.'.join(result.path)}**", ""]

    if isinstance(value, UnresolvedValue):
        lines.append("Not statically resolvable:")
        lines.append("```ts")
        lines.append(value.source)
        lines.append("```")
    elif isinstance(value, ObjectValue):
        keys = value.keys()
        lines.append(f"`object` with {len(keys)} keys")
        lines.append("")
        for key in keys[:HOVER_CHILD_LIMIT]:
            lines.append(f"- `{key}`: {preview(value.entries[key])}")
        if len(keys) > HOVER_CHILD_LIMIT:
            lines.append(f"- ... {len(keys) - HOVER_CHILD_LIMIT} more")
    elif isinstance(value, ListValue):
        lines.append(f"`list` of {len(value.items)} items")
    else:
        lines.append(f"`{preview(value)}` ({value.kind})")

    if isinstance(value, StringValue):
        color = parse_color(value.value)
        if color is not None:
            lines.append("")
            lines.append(f"Color: `{to_hex(color)}` · `{to_css(color)}`")

    return "\n".join(lines)


def start_server():
    """Start the themelens LSP server."""
    logger.info("Starting themelens Language Server...")
    server.start_io()


if __name__ == "__main__":
    start_server()
