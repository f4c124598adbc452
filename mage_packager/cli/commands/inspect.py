"""
Inspect 命令实现

查看已生成包文件中 package.xml 的信息。
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ...build.build_context import ArchiveError
from ...build.manifest import read_manifest


console = Console()
err_console = Console(stderr=True)


def inspect_command(
    package: str = typer.Argument(..., help="包文件路径 (.tgz)"),
    json_output: bool = typer.Option(False, "--json", help="输出 JSON 格式"),
    show_files: bool = typer.Option(False, "--files", help="显示文件列表"),
) -> None:
    """查看包信息

    示例:
        packager inspect Foo_Bar-1.0.0.tgz
        packager inspect Foo_Bar-1.0.0.tgz --files
        packager inspect Foo_Bar-1.0.0.tgz --json
    """
    package_path = Path(package)

    if not package_path.is_file():
        err_console.print(f"[red]包文件不存在: {package_path}[/red]", highlight=False)
        raise typer.Exit(1)

    try:
        manifest = read_manifest(package_path)
    except ArchiveError as e:
        err_console.print(f"[red]检查包文件失败: {e}[/red]", highlight=False)
        raise typer.Exit(1)

    if json_output:
        console.print_json(json.dumps(manifest, ensure_ascii=False))
        return

    _display_manifest(manifest, show_files)


def _display_manifest(manifest: dict, show_files: bool) -> None:
    """显示清单信息"""
    table = Table(title="包信息")
    table.add_column("字段", style="cyan", no_wrap=True)
    table.add_column("值", style="green")

    for key in ('name', 'version', 'stability', 'license', 'channel', 'summary', 'date', 'time'):
        if key in manifest:
            table.add_row(key, manifest[key])

    php = manifest.get('php')
    if php:
        table.add_row("php", f"{php['min']} - {php['max']}")

    authors = ", ".join(author.get('name', '') for author in manifest.get('authors', []))
    table.add_row("authors", authors or "-")

    console.print(table)

    target_table = Table(title="目标")
    target_table.add_column("目标", style="cyan")
    target_table.add_column("文件数", style="green", justify="right")
    for target in manifest.get('targets', []):
        target_table.add_row(target['name'], str(len(target['files'])))
    console.print(target_table)

    if show_files:
        for target in manifest.get('targets', []):
            console.print(f"[bold]{target['name']}[/bold]")
            for entry in target['files']:
                console.print(f"  {entry['path']}  [dim]{entry['hash']}[/dim]", highlight=False)
