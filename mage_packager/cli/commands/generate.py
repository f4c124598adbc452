"""
Generate 命令实现

在目录中生成 package.yml 模板。
"""

import os
from typing import Optional

import typer
from rich.console import Console

from ...config import ConfigError, generate_config


console = Console()
err_console = Console(stderr=True)


def generate_command(
    directory: Optional[str] = typer.Argument(None, help="生成 package.yml 的目录（默认当前目录）"),
) -> None:
    """生成包描述文件模板

    示例:
        packager generate
        packager generate ./Foo_Bar
    """
    directory = directory or os.getcwd()

    try:
        config_path = generate_config(directory)
    except ConfigError as e:
        err_console.print(f"[red]生成失败[/red]: {e}", highlight=False)
        raise typer.Exit(1)

    console.print(f"[green]✓ 包描述文件创建成功[/green]: {config_path}", highlight=False)
