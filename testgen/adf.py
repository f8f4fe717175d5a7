"""
Atlassian Document Format (ADF) Flattening
Render Jira rich-text documents (descriptions, comments, custom fields) into plain text
"""
from typing import Any, Dict, List

INDENT_UNIT = '  '
MAX_HEADING_LEVEL = 6


def _children(node: Any) -> List[Any]:
    """Return a node's content list, or an empty list when it has none"""
    if isinstance(node, dict) and isinstance(node.get('content'), list):
        return node['content']
    return []


def _render_inline(nodes: Any) -> str:
    """Render inline nodes without adding block-level newlines"""
    if not isinstance(nodes, list):
        return ''

    parts = []
    for node in nodes:
        if not isinstance(node, dict):
            continue
        node_type = node.get('type')
        if node_type == 'text' and isinstance(node.get('text'), str):
            parts.append(node['text'])
        elif node_type == 'hardBreak':
            parts.append('\n')
        # mention, emoji, inlineCard and other inline nodes carry no plain text here
    return ''.join(parts)


def _attrs(node: Dict[str, Any]) -> Dict[str, Any]:
    attrs = node.get('attrs')
    return attrs if isinstance(attrs, dict) else {}


def _heading_level(node: Dict[str, Any]) -> int:
    level = _attrs(node).get('level', 1)
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        return 1
    return min(level, MAX_HEADING_LEVEL)


def _render_list(node: Dict[str, Any], indent_level: int, ordered: bool) -> str:
    indent = INDENT_UNIT * indent_level
    lines = []
    for position, item in enumerate(_children(node), start=1):
        if not isinstance(item, dict) or item.get('type') != 'listItem':
            continue
        if not isinstance(item.get('content'), list):
            continue
        item_text = flatten_adf({'content': item['content']}, indent_level + 1)
        marker = f"{position}." if ordered else '*'
        lines.append(f"{indent}{marker} {item_text.strip()}\n")
    return ''.join(lines)


def _render_block(node: Any, indent_level: int) -> str:
    if not isinstance(node, dict):
        return ''

    node_type = node.get('type')
    indent = INDENT_UNIT * indent_level
    content = node.get('content')

    if node_type == 'paragraph':
        return _render_inline(content) + '\n'

    if node_type == 'bulletList':
        return _render_list(node, indent_level, ordered=False)

    if node_type == 'orderedList':
        return _render_list(node, indent_level, ordered=True)

    if node_type == 'heading':
        if not isinstance(content, list):
            return ''
        return f"{indent}{'#' * _heading_level(node)} {_render_inline(content)}\n\n"

    if node_type == 'codeBlock':
        first = content[0] if isinstance(content, list) and content else None
        code = first.get('text') if isinstance(first, dict) else None
        if not isinstance(code, str) or not code:
            return ''
        language = _attrs(node).get('language') or ''
        return f"\n{indent}```{language}\n{code}\n{indent}```\n\n"

    if node_type == 'panel':
        if not isinstance(content, list):
            return ''
        inner = flatten_adf(node, indent_level + 1)
        return f"\n{indent}--- Panel ---\n{inner}\n{indent}--- End Panel ---\n\n"

    if node_type == 'mediaSingle':
        first = content[0] if isinstance(content, list) and content else None
        if isinstance(first, dict) and first.get('type') == 'media':
            url = _attrs(first).get('url')
            if url:
                return f"{indent}[Image: {url}]\n\n"
        return ''

    if node_type == 'rule':
        return f"{indent}---\n\n"

    # Unhandled block types pass their children through at the same level
    if isinstance(content, list):
        return flatten_adf(node, indent_level)
    return ''


def flatten_adf(doc: Any, indent_level: int = 0) -> str:
    """
    Flatten an ADF document (or any node with a ``content`` list) to plain text.

    Never raises: malformed branches render as empty text. The input is not modified.

    Args:
        doc: ADF document or node
        indent_level: Nesting depth used to indent list items and block markers

    Returns:
        Plain text with leading and trailing whitespace stripped
    """
    if not isinstance(doc, dict) or not isinstance(doc.get('content'), list):
        return ''

    indent_level = max(int(indent_level), 0) if isinstance(indent_level, int) else 0
    text = ''.join(_render_block(node, indent_level) for node in doc['content'])
    return text.strip()
