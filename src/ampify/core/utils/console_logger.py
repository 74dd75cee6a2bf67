# src/ampify/core/utils/console_logger.py
from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Dict, Iterator, Optional, Sequence, Union

from rich.console import Console
from rich.text import Text

from ampify.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)

SPACE_SIZE = 10
SPACER = " "


class MessageType(Enum):
    INSTRUCTION = "instruction"
    STATUS = "status"
    STATUS_COMPLETE = "status_complete"
    INFO = "info"
    UPDATE = "update"
    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"
    TITLE = "title"


MESSAGE_STYLES: Dict[MessageType, str] = {
    MessageType.INSTRUCTION: "bright_cyan",
    MessageType.STATUS: "yellow",
    MessageType.STATUS_COMPLETE: "bright_green",
    MessageType.INFO: "bright_black",
    MessageType.UPDATE: "bright_yellow",
    MessageType.PASS: "bright_green",
    MessageType.FAIL: "bright_red",
    MessageType.ERROR: "bright_red",
    MessageType.TITLE: "bold underline bright_magenta",
}


class ConsoleLogger:
    """
    Human-facing progress output for the conversion pipeline.

    Messages are styled per MessageType and indented by the current group
    depth. The depth is shared by every ConsoleLogger instance, so nested
    steps in different modules line up under the step that opened the group.
    """

    _group = 0

    def __init__(
            self,
            tag: str,
            verbose: bool = True,
            style: str = "white",
            console: Optional[Console] = None,
            info_verbose: Optional[bool] = None,
    ):
        self.tag = tag
        self.verbose = verbose
        self.style = style
        self.console = console or Console(highlight=False)
        self.indent = int(config_manager.get_nested("console.indent", 2))
        if info_verbose is None:
            info_verbose = bool(config_manager.get_nested("console.info_verbose", False))
        self.info_verbose = info_verbose

    # -------- Grouping --------

    @classmethod
    def get_group(cls) -> int:
        return cls._group

    @classmethod
    def set_group(cls, group: int) -> None:
        if group < 0:
            logger.warning("Console group cannot drop below 0 (requested %d).", group)
            group = 0
        cls._group = group

    def add_group(self, num: int = 1) -> None:
        self.info(f"add_group(): group = {self._group} -> {self._group + num}")
        self.set_group(self._group + num)

    def end_group(self, num: int = 1) -> None:
        self.info(f"end_group(): group = {self._group} -> {self._group - num}")
        self.set_group(self._group - num)

    @contextmanager
    def grouped(self, num: int = 1) -> Iterator["ConsoleLogger"]:
        """Indents everything logged inside the block by `num` levels."""
        self.add_group(num)
        try:
            yield self
        finally:
            self.end_group(num)

    # -------- Output --------

    def log(self, msg: str, msg_type: Optional[MessageType] = None, group: Optional[int] = None) -> None:
        """Prints `msg` with the style of `msg_type` at the given (or current) group depth."""
        if not self.verbose:
            return
        if group is not None:
            self.set_group(group)
        style = MESSAGE_STYLES[msg_type] if msg_type else self.style
        padding = " " * (self.indent * self._group)
        self.console.print(Text(f"{padding}{msg}", style=style), soft_wrap=True)

    def info(self, msg: str) -> None:
        """Debug chatter; only shown when info verbosity is on. Never indented."""
        if not (self.verbose and self.info_verbose):
            return
        text = Text()
        text.append(self.format_field(f"[{self.tag}]", SPACE_SIZE, centered=False), style="bold bright_black")
        text.append(f" {msg}", style=MESSAGE_STYLES[MessageType.INFO])
        self.console.print(text, soft_wrap=True)

    def title(self, msg: str, group: Optional[int] = None) -> None:
        self.log(msg, MessageType.TITLE, group)

    def status(self, msg: str, group: Optional[int] = None) -> None:
        self.log(msg, MessageType.STATUS, group)

    def instruction(self, msg: str, group: Optional[int] = None) -> None:
        self.log(msg, MessageType.INSTRUCTION, group)

    def update(self, msg: str, group: Optional[int] = None) -> None:
        self.log(msg, MessageType.UPDATE, group)

    def complete(self, msg: str, group: Optional[int] = None) -> None:
        self.log(msg, MessageType.STATUS_COMPLETE, group)

    def passed(self, msg: str, group: Optional[int] = None) -> None:
        self.log(msg, MessageType.PASS, group)

    def failed(self, msg: str, group: Optional[int] = None) -> None:
        self.log(msg, MessageType.FAIL, group)

    def error(self, msg: str, group: Optional[int] = None) -> None:
        self.log(msg, MessageType.ERROR, group)

    def line(self, num: int = 1) -> None:
        for _ in range(num):
            self.console.print("")

    def print_table(self, table: Sequence[Union[str, Sequence[str]]], delimiter: str = " ") -> None:
        """Prints rows without any styling."""
        for row in table:
            text = row if isinstance(row, str) else delimiter.join(str(cell) for cell in row)
            self.log(text)

    # -------- Formatting helpers --------

    @staticmethod
    def format_field(msg, size: int = SPACE_SIZE, centered: bool = True, spacer: str = SPACER) -> str:
        """
        Fits `msg` into a fixed-width field of `size` characters, either
        centered or left aligned. Longer messages are cut.
        """
        msg = str(msg)[:size]
        if not centered:
            return msg + spacer * (size - len(msg))
        start = max((size - len(msg)) // 2, 0)
        return spacer * start + msg + spacer * (size - len(msg) - start)

    @staticmethod
    def trim_url(url: str, length: int, offset: int = 10) -> str:
        """Shortens `url` to `length` characters by cutting out the middle."""
        if len(url) <= length:
            return url
        if length <= 3:
            return url[:length]
        head = min(length // 2 + offset, length - 3)
        tail = length - head - 3
        return url[:head] + "..." + (url[-tail:] if tail > 0 else "")
