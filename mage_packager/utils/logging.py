"""
日志工具 - 统一输出门面

提供带时间戳和阶段标记的统一输出接口，封装底层的 Rich Console。
"""

import atexit
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from rich.console import Console


class OutputLevel:
    """输出级别常量"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogStage:
    """日志阶段标记（对应打包流程的各个阶段）"""
    LOAD = "LOAD"
    SCAN = "SCAN"
    MANIFEST = "MANIFEST"
    ARCHIVE = "ARCHIVE"
    COMPRESS = "COMPRESS"
    RENAME = "RENAME"
    DONE = "DONE"
    PACK = "PACK"


_LEVEL_ORDER = {
    OutputLevel.DEBUG: 0,
    OutputLevel.INFO: 1,
    OutputLevel.SUCCESS: 1,
    OutputLevel.WARNING: 2,
    OutputLevel.ERROR: 3,
}

_LEVEL_STYLES = {
    OutputLevel.DEBUG: "dim",
    OutputLevel.INFO: "default",
    OutputLevel.SUCCESS: "green",
    OutputLevel.WARNING: "yellow",
    OutputLevel.ERROR: "red bold",
}


class OutputFacade:
    """输出门面

    统一封装所有输出操作。普通信息写入 stdout，错误写入 stderr，
    所有输出都带时间戳，可选同时写入日志文件。
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._console = Console(highlight=False, log_path=False)
        self._error_console = Console(stderr=True, highlight=False, log_path=False)
        self._file_handle = None  # type: Optional[Any]
        self._log_level = OutputLevel.INFO
        self._date_format = "%Y-%m-%d %H:%M:%S"
        self._time_format = "%H:%M:%S"

    def _get_timestamp(self, include_date: bool = False) -> str:
        now = datetime.now()
        if include_date:
            return now.strftime(self._date_format)
        return now.strftime(self._time_format)

    def _should_output(self, level: str) -> bool:
        """判断是否应该输出该级别的消息"""
        current_level = _LEVEL_ORDER.get(self._log_level, 1)
        return _LEVEL_ORDER.get(level, 1) >= current_level

    def _format_message(self, message: str, level: str,
                        stage: Optional[str] = None, include_date: bool = False) -> str:
        timestamp = self._get_timestamp(include_date)
        if stage:
            return f"[{timestamp}] [{level}] [{stage}] {message}"
        return f"[{timestamp}] [{level}] {message}"

    def _write_to_file(self, message: str, level: str, stage: Optional[str] = None):
        if not self._file_handle:
            return
        self._file_handle.write(self._format_message(message, level, stage, include_date=True) + "\n")
        self._file_handle.flush()

    def emit(self, message: str, level: str, stage: Optional[str] = None):
        """输出一条消息"""
        if not self._should_output(level):
            return

        with self._lock:
            console = self._error_console if level == OutputLevel.ERROR else self._console
            timestamp = self._get_timestamp()
            prefix = f"[dim]{timestamp}[/dim] [bold]{level}[/bold]"
            if stage:
                prefix += f" [cyan]{stage}[/cyan]"
            # 消息本身不做 markup 解析，避免路径中的方括号被吞掉
            console.print(prefix, end=" ")
            console.print(message, style=_LEVEL_STYLES.get(level, "default"), markup=False)

            self._write_to_file(message, level, stage)

    def set_level(self, level: str):
        """设置输出级别"""
        with self._lock:
            if level in _LEVEL_ORDER:
                self._log_level = level

    def set_log_file(self, file_path: Union[str, Path]):
        """设置日志文件

        Raises:
            OSError: 无法打开日志文件
        """
        with self._lock:
            self.close()
            log_path = Path(file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(log_path, 'a', encoding='utf-8')

    def close(self):
        """关闭日志文件"""
        with self._lock:
            if self._file_handle:
                self._file_handle.close()
                self._file_handle = None


# 全局输出门面实例
_output_facade: Optional[OutputFacade] = None


def get_output_facade() -> OutputFacade:
    """获取全局输出门面实例"""
    global _output_facade
    if _output_facade is None:
        _output_facade = OutputFacade()
    return _output_facade


def debug(message: str, stage: Optional[str] = None):
    """调试信息输出"""
    get_output_facade().emit(message, OutputLevel.DEBUG, stage)


def info(message: str, stage: Optional[str] = None):
    """普通信息输出"""
    get_output_facade().emit(message, OutputLevel.INFO, stage)


def success(message: str, stage: Optional[str] = None):
    """成功信息输出"""
    get_output_facade().emit(message, OutputLevel.SUCCESS, stage)


def warning(message: str, stage: Optional[str] = None):
    """警告信息输出"""
    get_output_facade().emit(message, OutputLevel.WARNING, stage)


def error(message: str, stage: Optional[str] = None):
    """错误信息输出（stderr）"""
    get_output_facade().emit(message, OutputLevel.ERROR, stage)


def set_log_level(level: str):
    """设置全局日志级别"""
    get_output_facade().set_level(level)


def set_log_file(file_path: Union[str, Path]):
    """设置全局日志文件"""
    get_output_facade().set_log_file(file_path)


def configure_logging(level: str = OutputLevel.INFO, log_file: Optional[Union[str, Path]] = None):
    """配置日志系统"""
    set_log_level(level)
    if log_file:
        set_log_file(log_file)


def close_logger():
    """关闭日志系统"""
    global _output_facade
    if _output_facade:
        _output_facade.close()
        _output_facade = None


atexit.register(close_logger)
