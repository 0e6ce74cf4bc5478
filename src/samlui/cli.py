"""
samlui CLI - entry point.

Commands:
- check: parse and compile documents, reporting the first error per file
- tree: print the compiled structure of one document
- project: load a samlui.toml project and report binding issues
"""

from __future__ import annotations

import json
import logging
import platform
import sys
from pathlib import Path
from typing import assert_never

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from samlui._version import get_version
from samlui.core import ir
from samlui.core.errors import SamlError
from samlui.core.items import ROOT_GROUP_NAME, EnumItem, ItemGroup, Items, ItemsNode
from samlui.core.items_loader import load_items
from samlui.core.manifest import MANIFEST_NAME, load_manifest
from samlui.core.project import load_project
from samlui.core.sml import SmlDocument
from samlui.core.ui_parser import parse_control

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    help="""samlui - declarative UI documents

Commands:
  • check FILE...     Parse items and control documents
  • tree FILE         Show the compiled structure of one document
  • project           Load samlui.toml in the project directory and check bindings
""",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"samlui {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log parse progress"),
) -> None:
    """samlui CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def compile_file(path: Path) -> Items | ir.ControlDescriptor:
    """Parse one document, dispatching on its root element."""
    logger.debug("Compiling %s", path)
    document = SmlDocument.parse(path.read_text(encoding="utf-8"), source=str(path))
    if document.root.has_name(ROOT_GROUP_NAME):
        return load_items(document.root)
    return parse_control(document.root)


def _summary(result: Items | ir.ControlDescriptor) -> str:
    if isinstance(result, Items):
        nodes = [node for _, node in result.walk()]
        groups = sum(1 for node in nodes if node.is_group)
        return f"{len(nodes) - groups} items, {groups} groups"
    controls = list(ir.iter_controls(result))
    return f"{result.kind}, {len(controls)} controls"


@app.command()
def check(
    files: list[Path] = typer.Argument(..., help="Documents to check", exists=True, dir_okay=False),  # noqa: B008
) -> None:
    """
    Parse each document and compile it.

    A document whose root element is Items is loaded as an item store,
    anything else is compiled as a control tree.
    """
    failed = 0
    for path in files:
        try:
            result = compile_file(path)
        except SamlError as e:
            failed += 1
            console.print(f"[red]✗[/red] {path}")
            typer.echo(f"  {e}", err=True)
            continue
        console.print(f"[green]✓[/green] {path} ({_summary(result)})")

    if failed:
        typer.echo(f"{failed} of {len(files)} document(s) failed", err=True)
        raise typer.Exit(code=1)


def _control_label(control: ir.ControlBase) -> str:
    match control:
        case ir.LinearLayout():
            return f"[bold]LinearLayout[/bold] {control.direction.value}"
        case ir.Button(command=str() as command):
            return f"[bold]Button[/bold] → {command}"
        case ir.TextBox(item=str() as item):
            suffix = " (multi-line)" if control.multi_line else ""
            return f"[bold]TextBox[/bold] → {item}{suffix}"
        case ir.Label(item=str() as item):
            return f"[bold]Label[/bold] → {item}"
        case _:
            return f"[bold]{control.kind}[/bold]"


def _add_control(tree: Tree, control: ir.ControlBase) -> None:
    match control:
        case ir.GridLayout():
            for child in control.children:
                cell = tree.add(
                    f"[dim]cell {child.column_index},{child.row_index} "
                    f"span {child.column_span}x{child.row_span}[/dim]"
                )
                _add_control(cell.add(_control_label(child.control)), child.control)
        case ir.TabControl():
            for tab in control.tabs:
                page = tree.add(f"Tab {tab.title or ''}".rstrip())
                if tab.content is not None:
                    _add_control(page.add(_control_label(tab.content)), tab.content)
        case ir.MenuBar():
            for menu in control.menus:
                branch = tree.add(f"DropDownMenu {menu.title or ''}".rstrip())
                for entry in menu.entries:
                    branch.add(f"{entry.kind} → {_entry_target(entry)}")
        case _:
            for child in control.child_controls():
                _add_control(tree.add(_control_label(child)), child)


def _entry_target(entry: ir.MenuEntry) -> str:
    match entry:
        case ir.CommandMenuEntry():
            return entry.command
        case ir.CheckMenuEntry():
            return entry.bool_item
        case ir.EnumMenuEntry():
            return entry.enum_item
        case _:
            assert_never(entry)


def _add_items(tree: Tree, group: ItemGroup) -> None:
    for node in group.nodes():
        if isinstance(node, ItemGroup):
            _add_items(tree.add(f"[bold]{node.name}[/bold]"), node)
            continue
        branch = tree.add(_item_label(node))
        if isinstance(node, EnumItem):
            for option in node.options:
                branch.add(option.name)


def _item_label(node: ItemsNode) -> str:
    title = getattr(node, "title", None)
    label = f"{node.name} [dim]{node.kind.value}[/dim]"
    return f'{label} "{title}"' if title is not None else label


@app.command()
def tree(
    file: Path = typer.Argument(..., help="Document to show", exists=True, dir_okay=False),  # noqa: B008
    as_json: bool = typer.Option(False, "--json", help="Print the compiled structure as JSON"),
) -> None:
    """Print the compiled structure of a document."""
    try:
        result = compile_file(file)
    except SamlError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if isinstance(result, Items):
        if as_json:
            rows = [{"path": path, "kind": node.kind.value} for path, node in result.walk()]
            typer.echo(json.dumps(rows, indent=2))
            return
        root = Tree(f"[bold]{ROOT_GROUP_NAME}[/bold]")
        _add_items(root, result.root)
        console.print(root)
        return

    if as_json:
        typer.echo(ir.ControlTree(root=result).model_dump_json(indent=2))
        return
    root = Tree(_control_label(result))
    _add_control(root, result)
    console.print(root)


@app.command()
def project(
    project_dir: Path = typer.Option(  # noqa: B008
        Path("."),
        "--project",
        "-p",
        help="Project root directory (default: current directory)",
        file_okay=False,
    ),
) -> None:
    """
    Load a samlui.toml project and check its bindings.

    Exits with code 1 if any screen references a missing item or an item
    of the wrong kind.
    """
    manifest_path = project_dir / MANIFEST_NAME
    if not manifest_path.exists():
        typer.echo(f"Error: no {MANIFEST_NAME} in {project_dir.resolve()}", err=True)
        raise typer.Exit(code=1)

    try:
        manifest = load_manifest(manifest_path)
        root_logger = logging.getLogger()
        if root_logger.level > logging.DEBUG:
            root_logger.setLevel(manifest.logging.level_number)
        loaded = load_project(project_dir)
    except SamlError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    table = Table(title=f"{manifest.name} {manifest.version}")
    table.add_column("Screen", style="cyan")
    table.add_column("Root")
    table.add_column("Controls", justify="right")
    table.add_column("Issues", justify="right")
    for name, screen in loaded.screens.items():
        issues = loaded.issues.get(name, [])
        table.add_row(
            name,
            screen.kind,
            str(sum(1 for _ in ir.iter_controls(screen))),
            f"[red]{len(issues)}[/red]" if issues else "0",
        )
    console.print(table)

    for name, issues in loaded.issues.items():
        for issue in issues:
            typer.echo(f"{name}: {issue.describe()}", err=True)

    if loaded.has_issues:
        raise typer.Exit(code=1)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
