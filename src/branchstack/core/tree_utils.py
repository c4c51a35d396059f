"""Tree visualization utilities for stacks.

Pure functions rendering a Stack as an indented tree. Used by the
`bstack show` command.
"""

from branchstack.core.identifiers import BranchName
from branchstack.core.stack_graph import Stack


def format_stack_as_tree(stack: Stack, *, current_branch: BranchName | None = None) -> str:
    """Format a stack as a hierarchical tree with tip and status.

    Args:
        stack: Stack to render
        current_branch: Branch to highlight with a leading marker, if any

    Returns:
        Multi-line string with tree visualization
    """
    lines: list[str] = [f'stack "{stack.name}"']
    format_branch_recursive(
        stack=stack,
        branch=stack.root,
        lines=lines,
        prefix="",
        is_last=True,
        is_root=True,
        current_branch=current_branch,
    )
    return "\n".join(lines)


def format_branch_recursive(
    stack: Stack,
    branch: BranchName,
    lines: list[str],
    prefix: str,
    is_last: bool,
    is_root: bool,
    current_branch: BranchName | None,
) -> None:
    """Recursively format a branch and its children.

    Args:
        stack: Stack being rendered
        branch: Name of current branch to format
        lines: List to append formatted lines to
        prefix: Prefix string for indentation
        is_last: True if this is the last child of its parent
        is_root: True if this is the stack root
        current_branch: Branch to highlight, if any
    """
    node = stack.node(branch)
    if node is None:
        return

    short_sha = node.tip.short() if node.tip is not None else "no tip"
    marker = "* " if branch == current_branch else ""
    branch_info = f"{marker}{branch} ({short_sha}) [{node.status.value}]"

    if is_root:
        lines.append(branch_info)
    else:
        connector = "└─" if is_last else "├─"
        lines.append(f"{prefix}{connector} {branch_info}")

    children = stack.children_of(branch)
    if not children:
        return

    if is_root:
        child_prefix = ""
    else:
        child_prefix = prefix + ("   " if is_last else "│  ")

    for i, child in enumerate(children):
        format_branch_recursive(
            stack=stack,
            branch=child,
            lines=lines,
            prefix=child_prefix,
            is_last=i == len(children) - 1,
            is_root=False,
            current_branch=current_branch,
        )
