"""
Validate 命令实现

验证 package.yml 的命令。
"""

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ...config import DESCRIPTOR_FILE_NAME, ConfigError, ConfigValidationError, load_config


console = Console()
err_console = Console(stderr=True)


def validate_command(
    path: str = typer.Argument(..., help="模块目录或 package.yml 路径"),
    json_output: bool = typer.Option(False, "--json", help="输出 JSON 格式的结果"),
) -> None:
    """验证包描述文件

    示例:
        packager validate ./Foo_Bar
        packager validate ./Foo_Bar/package.yml --json
    """
    config_path = Path(path)
    if config_path.is_dir():
        config_path = config_path / DESCRIPTOR_FILE_NAME

    try:
        descriptor = load_config(config_path)
    except ConfigValidationError as e:
        if json_output:
            error_data = {
                "file": str(config_path),
                "errors": e.errors,
            }
            console.print_json(json.dumps(error_data, ensure_ascii=False, default=str))
        else:
            err_console.print("[red]包描述验证失败:[/red]")
            err_console.print(e.format_errors(), markup=False, highlight=False)
        raise typer.Exit(1)
    except ConfigError as e:
        if json_output:
            error_data = {
                "file": str(config_path),
                "error": str(e),
                "error_type": "config_error"
            }
            console.print_json(json.dumps(error_data, ensure_ascii=False))
        else:
            err_console.print(f"[red]配置错误[/red]: {e}", highlight=False)
        raise typer.Exit(1)

    if json_output:
        console.print_json(json.dumps({
            "file": str(config_path),
            "valid": True,
            "package": descriptor.to_dict(),
        }, ensure_ascii=False))
        return

    console.print(f"[green]✓ 包描述验证通过[/green]: {config_path}", highlight=False)

    table = Table(title="包信息")
    table.add_column("字段", style="cyan", no_wrap=True)
    table.add_column("值", style="green")

    table.add_row("name", descriptor.name)
    table.add_row("version", descriptor.version or "-")
    table.add_row("stability", descriptor.stability.value)
    table.add_row("channel", descriptor.channel)
    table.add_row("license", descriptor.license)
    table.add_row("php", f"{descriptor.php_min_version} - {descriptor.php_max_version}")
    table.add_row("authors", ", ".join(f"{author.name} <{author.email}>" for author in descriptor.authors))
    table.add_row("required", ", ".join(package.name for package in descriptor.required_packages) or "-")
    table.add_row("package", descriptor.archive_name)

    console.print(table)
