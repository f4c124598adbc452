"""
Mage Packager CLI 主入口

提供命令行接口，支持 pack/generate/validate/inspect 等命令。
"""

from typing import Optional

import typer
from rich.console import Console

from .. import __version__
from ..utils import configure_logging
from .commands import generate, inspect, pack, validate


# 创建主应用
app = typer.Typer(
    name="packager",
    help="Mage Packager - Magento 扩展打包工具",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# 控制台输出
console = Console()


def version_callback(value: bool) -> None:
    """显示版本信息"""
    if value:
        console.print(f"Mage Packager v{__version__}")
        raise typer.Exit()


def quiet_callback(quiet: bool) -> None:
    """安静模式只输出警告和错误"""
    configure_logging(level="WARNING" if quiet else "INFO")


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="显示版本信息"
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        callback=quiet_callback,
        help="只输出警告和错误"
    )
) -> None:
    """Mage Packager - Magento 扩展打包工具

    使用 --help 查看可用命令的详细信息。
    """
    pass


# 注册子命令
app.command("pack", help="从目录创建 Magento 扩展包")(pack.pack_command)
app.command("generate", help="生成 package.yml 模板")(generate.generate_command)
app.command("validate", help="验证 package.yml")(validate.validate_command)
app.command("inspect", help="查看包文件信息")(inspect.inspect_command)


if __name__ == "__main__":
    app()
