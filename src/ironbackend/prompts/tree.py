"""Text renderings of a style's recommended folder layout."""

from __future__ import annotations

from ironbackend.schemas.registry import FolderNode


def format_folder_structure(node: FolderNode, indent: int = 0) -> str:
    """Render ``node`` and its descendants one line per node.

    Each line is ``"  " * depth + icon + " " + name``, followed by
    ``" # description"`` when the node has one. Children come depth-first,
    right after their parent.
    """
    icon = "📁" if node.type == "folder" else "📄"
    line = f"{'  ' * indent}{icon} {node.name}"
    if node.description:
        line += f" # {node.description}"

    lines = [line]
    for child in node.children:
        lines.append(format_folder_structure(child, indent + 1))
    return "\n".join(lines)


def format_folder_tree(node: FolderNode, indent: int = 0, is_last: bool = True) -> str:
    """Box-drawing variant without icons or descriptions."""
    if indent == 0:
        line = f"{node.name}/"
    else:
        branch = "└── " if is_last else "├── "
        line = f"{'│   ' * (indent - 1)}{branch}{node.name}/"

    lines = [line]
    last = len(node.children) - 1
    for i, child in enumerate(node.children):
        lines.append(format_folder_tree(child, indent + 1, i == last))
    return "\n".join(lines)
