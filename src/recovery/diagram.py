"""Normalize LLM-written Mermaid diagrams into text the renderer can draw.

``normalize_diagram`` is total: whatever it is given, it returns diagram
source starting with a known header and holding at least one statement. When
repair cannot get there it returns ``FALLBACK_DIAGRAM``.

Each line is tagged once (header / node-edge / bare node / unrecognized) and
the tag alone picks the repair rule; no state is carried between lines.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List

from loguru import logger

from recovery.text_boundary import extract_fenced_block, iter_fenced_blocks, strip_code_fence

DIAGRAM_HEADERS = (
    "flowchart TD",
    "flowchart LR",
    "flowchart TB",
    "flowchart RL",
    "graph TD",
    "graph LR",
    "graph TB",
    "graph RL",
    "sequenceDiagram",
    "classDiagram",
    "erDiagram",
    "gitgraph",
    "pie",
    "journey",
    "gantt",
    "mindmap",
    "timeline",
)

DEFAULT_HEADER = "flowchart TD"

FALLBACK_DIAGRAM = "flowchart TD\nA[Application] --> B[Component]\nB --> C[Output]"

# Headers whose body follows flowchart grammar; only these get line repairs
_FLOW_PREFIXES = ("flowchart", "graph")

# Node shapes and inline text that must survive identifier sanitation
_LABEL_SHAPES = (
    r"\(\([^)]*\)\)"
    r"|\[\[[^\]]*\]\]"
    r"|\{\{[^}]*\}\}"
    r"|\[[^\]]*\]"
    r"|\([^)]*\)"
    r"|\{[^}]*\}"
)
_ARROWS = r"-{2,}>{1,2}|-{3,}|={2,}>|-\.+->|--(?=\s)"

_EDGE_PRESERVED_RE = re.compile(
    rf"({_LABEL_SHAPES}|\|[^|]*\||\"[^\"]*\"|{_ARROWS}|\s&\s|;\s*$)"
)
_ARROW_TOKEN_RE = re.compile(r"-{2,}>|-{3,}|={2,}>|-\.+->")
_ARROW_SPACING_RE = re.compile(r"[ \t]*(-{2,}>{1,2}|-{3,})[ \t]*")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")
_BARE_NODE_RE = re.compile(rf"^[A-Za-z0-9_]+(?:{_LABEL_SHAPES})?;?$")

_UNSAFE_ID_RE = re.compile(r"[^A-Za-z0-9_]")
_UNSAFE_LINE_RE = re.compile(r"[^A-Za-z0-9_\[\]\->\s]")

# A header keyword must end at whitespace, ';' or end of text ("pieces" is not "pie")
_HEADER_RE = re.compile(
    r"^(?:%s)(?=[\s;]|$)" % "|".join(re.escape(header) for header in DIAGRAM_HEADERS)
)


class LineKind(str, Enum):
    """Tag deciding which repair rule a diagram line gets."""

    HEADER = "header"
    NODE_EDGE = "node_edge"
    BARE_NODE = "bare_node"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class DiagramLine:
    kind: LineKind
    text: str


def is_diagram_header(line: str) -> bool:
    """True if ``line`` starts with one of the enumerated diagram headers."""
    return _HEADER_RE.match(line) is not None


def classify_line(line: str, first: bool = False) -> DiagramLine:
    """Tag one trimmed line. Only the first line may be a header."""
    if first and is_diagram_header(line):
        return DiagramLine(LineKind.HEADER, line)
    if _ARROW_TOKEN_RE.search(line):
        return DiagramLine(LineKind.NODE_EDGE, line)
    if _BARE_NODE_RE.match(line):
        return DiagramLine(LineKind.BARE_NODE, line)
    return DiagramLine(LineKind.UNRECOGNIZED, line)


def sanitize_node_ids(line: str) -> str:
    """Replace unsafe characters in identifier tokens of an edge statement.

    Labels, edge text, quoted strings, arrows, ``&`` and a trailing ``;``
    are kept verbatim.
    """
    parts = _EDGE_PRESERVED_RE.split(line)
    fixed = []
    for idx, part in enumerate(parts):
        # re.split puts captured (preserved) tokens at odd indices
        if idx % 2 == 1 or not part.strip():
            fixed.append(part)
            continue
        core = part.strip()
        lead = part[: len(part) - len(part.lstrip())]
        trail = part[len(part.rstrip()):]
        fixed.append(lead + _UNSAFE_ID_RE.sub("_", core) + trail)
    return "".join(fixed)


def _repair_line(line: DiagramLine) -> str:
    if line.kind is LineKind.NODE_EDGE:
        return sanitize_node_ids(line.text)
    if line.kind is LineKind.UNRECOGNIZED:
        return _UNSAFE_LINE_RE.sub("_", line.text).strip()
    return line.text


def _unwrap(text: str) -> str:
    if not text.lstrip().startswith("```"):
        block = extract_fenced_block(text)
        if block is not None:
            return block.strip()
    return strip_code_fence(text)


def normalize_diagram(text: Any) -> str:
    """Return renderable diagram source for ``text``.

    Args:
        text: Diagram source from the model. None, non-strings and blank
              strings yield the fallback diagram.

    Returns:
        Diagram text starting with one of DIAGRAM_HEADERS.
    """
    if not isinstance(text, str) or not text.strip():
        return FALLBACK_DIAGRAM

    cleaned = _unwrap(text)
    if not is_diagram_header(cleaned):
        logger.debug(f"Diagram has no recognized header, assuming '{DEFAULT_HEADER}'")
        cleaned = f"{DEFAULT_HEADER}\n{cleaned}"

    cleaned = _BLANK_LINES_RE.sub("\n", cleaned).strip()

    raw_lines = cleaned.splitlines()
    header = classify_line(raw_lines[0].strip(), first=True)
    repairs_apply = header.text.startswith(_FLOW_PREFIXES)

    lines: List[str] = [header.text]
    for raw in raw_lines[1:]:
        stripped = raw.strip()
        if not stripped:
            continue
        if not repairs_apply:
            lines.append(stripped)
            continue
        spaced = _ARROW_SPACING_RE.sub(r" \1 ", stripped).strip()
        repaired = _repair_line(classify_line(spaced))
        if repaired:
            lines.append(repaired)

    if len(lines) < 2:
        logger.debug("Diagram has no statements after repair, using fallback diagram")
        return FALLBACK_DIAGRAM

    return "\n".join(lines)


def normalize_embedded_diagrams(markdown: Any) -> str:
    """Normalize every ```mermaid block inside rendered documentation."""
    if not isinstance(markdown, str):
        return ""

    pieces: List[str] = []
    last = 0
    for match in iter_fenced_blocks(markdown, "mermaid"):
        pieces.append(markdown[last:match.start()])
        pieces.append(f"```mermaid\n{normalize_diagram(match.group('body'))}\n```")
        last = match.end()
    pieces.append(markdown[last:])
    return "".join(pieces)
