"""
Pack 命令实现

把模块目录打包为 Magento 扩展包的核心命令。
"""

import traceback
from typing import Optional

import typer
from rich.console import Console

from ...utils.logging import set_log_level, set_log_file, OutputLevel


console = Console()
err_console = Console(stderr=True)


def pack_command(
    directory: str = typer.Argument(..., help="要打包的模块目录（包含 package.yml）"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="包文件名或路径"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="日志输出文件"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出详细调试日志 (DEBUG 级别)"),
) -> None:
    """从目录创建 Magento 扩展包

    示例:
        packager pack ./Foo_Bar
        packager pack ./Foo_Bar -f foo.tgz
        packager pack ./Foo_Bar -f ../dist/foo.tgz
    """
    from ...build.builder import Packager

    if verbose:
        set_log_level(OutputLevel.DEBUG)

    if log_file:
        try:
            set_log_file(log_file)
        except OSError:
            err_console.print(f"[yellow]无法写入日志文件: {log_file}[/yellow]")

    def progress_callback(stage: str, current: int, total: int, message: str = "") -> None:
        """进度回调函数，仅在详细模式下显示"""
        if verbose and total > 0:
            percentage = (current / total) * 100
            console.print(f"[blue]{stage}[/blue]: {message} ({percentage:.0f}%)", markup=True, highlight=False)

    try:
        result = Packager().pack(directory, file, progress_callback=progress_callback)
    except Exception as e:
        err_console.print(f"[red]✗ 打包过程中发生意外错误[/red]: {e}")
        if log_file:
            err_console.print(f"[yellow]详细错误信息:[/yellow]\n{traceback.format_exc()}")
        raise typer.Exit(1)

    if not result.success:
        err_console.print(f"[red]✗ 打包失败[/red]: {result.error}", highlight=False)
        if log_file:
            err_console.print(f"[yellow]请检查日志文件 {log_file} 获取详细信息。[/yellow]")
        raise typer.Exit(1)

    console.print(f"[green]✓ 包文件创建成功[/green]: {result.output_path}", highlight=False)
    if result.output_size is not None:
        console.print(f"[blue]文件大小[/blue]: {result.output_size} 字节")
