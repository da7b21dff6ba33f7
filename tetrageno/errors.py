"""Uniformly formatted diagnostic messages and verbosity control."""

from __future__ import annotations

import inspect
import os
import sys
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, TextIO, Tuple


class MessageType(IntEnum):
    """Urgency of a message."""

    NO_MSG = 0
    INFO_MSG = 1
    DEBUG_MSG = 2
    WARNING_MSG = 3
    ERROR_MSG = 4


class ErrorCode(IntEnum):
    """Identifiers of canned messages."""

    NO_ERROR = 0
    CUSTOM_ERROR = 1
    NO_DATA = 2
    MEMORY_ALLOCATION = 3
    FILE_NOT_FOUND = 4
    FILE_OPEN_ERROR = 5
    END_OF_FILE = 6
    FILE_FORMAT_ERROR = 7
    INVALID_CMDLINE = 8
    INVALID_CMD_OPTION = 9
    INVALID_CMD_ARGUMENT = 10
    INVALID_USER_INPUT = 11
    INTERNAL_MISMATCH = 12
    INTERNAL_ERROR = 13
    CLUSTER_SIZE_OVERFLOW = 14
    STATE_SPACE_OVERFLOW = 15
    OUT_OF_TIME = 16
    MEMORY_USAGE_LIMIT = 17
    MEMCPY_ERROR = 18
    EXCEED_ITERATIONS = 19
    NUM_ERRORS = 20


class Verbosity(IntEnum):
    """Levels of verbosity."""

    ABSOLUTE_SILENCE = 0
    SILENT = 1
    QUIET = 2
    MINIMAL = 3
    RESTRAINED = 4
    TALKATIVE = 5
    VERBOSE = 6
    DEBUG_I = 7
    DEBUG_II = 8
    DEBUG_III = 9
    DEBUG_OVERRIDE = 10


@dataclass
class _DebugState:
    level: int = Verbosity.SILENT


_state = _DebugState()


def set_debug_level(level: int) -> None:
    """Set the global verbosity level."""
    _state.level = int(level)


def get_debug_level() -> int:
    """Return the global verbosity level."""
    return _state.level


def _call_site(skip: int) -> Tuple[str, str, int]:
    frame = inspect.currentframe()
    for _ in range(skip + 1):
        if frame is None:
            break
        frame = frame.f_back
    if frame is None:
        return "?", "?", 0
    code = frame.f_code
    return os.path.basename(code.co_filename), code.co_name, frame.f_lineno


def _apply(msg: Optional[str], args: tuple) -> str:
    if msg is None:
        return ""
    return msg % args if args else msg


def _header(msg_type: int) -> str:
    if msg_type == MessageType.INFO_MSG:
        return "INFO"
    if msg_type == MessageType.DEBUG_MSG:
        return "DEBUG"
    if msg_type == MessageType.WARNING_MSG:
        return "WARNING"
    return "ERROR"


def _prefixed(title: str, msg: Optional[str], args: tuple) -> str:
    if msg is not None:
        return f"{title}: {_apply(msg, args)}"
    return f"{title}\n"


def _body(msg_id: int, msg: Optional[str], args: tuple) -> str:
    shown = "(null)" if msg is None else msg
    if msg_id == ErrorCode.NO_ERROR:
        return _apply(msg, args)
    if msg_id == ErrorCode.MEMORY_ALLOCATION:
        if msg is not None:
            return "could not allocate " + _apply(msg, args)
        return "memory allocation error\n"
    if msg_id == ErrorCode.INVALID_CMD_OPTION:
        return _prefixed("unrecognized command option", msg, args)
    if msg_id == ErrorCode.INVALID_CMD_ARGUMENT:
        return _prefixed("invalid argument to command option", msg, args)
    if msg_id == ErrorCode.INVALID_CMDLINE:
        return f"[invalid command line] {shown}\n"
    if msg_id == ErrorCode.INVALID_USER_INPUT:
        text = _apply(msg, args) if msg is not None else ""
        return f"[invalid user choice] {text}\n"
    if msg_id == ErrorCode.FILE_OPEN_ERROR:
        return f'could not open file "{shown}"\n'
    if msg_id == ErrorCode.FILE_NOT_FOUND:
        return f'file "{shown}" not found\n'
    if msg_id == ErrorCode.FILE_FORMAT_ERROR:
        return _prefixed("invalid file format", msg, args)
    if msg_id == ErrorCode.END_OF_FILE:
        return f'unexpected end of file in file "{shown}"\n'
    if msg_id == ErrorCode.INTERNAL_MISMATCH:
        return f"[internal mismatch] {shown}\n"
    if msg_id == ErrorCode.OUT_OF_TIME:
        text = "out of time"
        if msg is not None:
            nsec = int(args[0]) if args else 0
            hours = int(nsec / 3600)
            minutes = int(int(nsec - hours * 3600) / 60)
            text += " (%slimit %02d:%02dm)" % (msg, hours, minutes)
        return text + "\n"
    if msg_id == ErrorCode.MEMORY_USAGE_LIMIT:
        return _prefixed("exceed memory limit", msg, args)
    if msg_id == ErrorCode.EXCEED_ITERATIONS:
        return _prefixed("exceed iteration limit", msg, args)
    return _apply(msg, args)


def format_message(msg_type, msg_id, msg=None, *args, file_name=None,
                   fxn_name=None, line=None) -> str:
    """Build a message with a location header and canned text for msg_id."""
    if file_name is None or fxn_name is None or line is None:
        site_file, site_fxn, site_line = _call_site(1)
        file_name = site_file if file_name is None else file_name
        fxn_name = site_fxn if fxn_name is None else fxn_name
        line = site_line if line is None else line
    head = "%s [%s::%s(%4d)]: " % (_header(msg_type), file_name, fxn_name, line)
    return head + _body(msg_id, msg, args)


def message(stream, msg_type, msg_id, msg=None, *args, file_name=None,
            fxn_name=None, line=None) -> int:
    """Write a formatted message to stream (stderr if None); return msg_id."""
    if file_name is None or fxn_name is None or line is None:
        site_file, site_fxn, site_line = _call_site(1)
        file_name = site_file if file_name is None else file_name
        fxn_name = site_fxn if fxn_name is None else fxn_name
        line = site_line if line is None else line
    out: TextIO = sys.stderr if stream is None else stream
    out.write(format_message(msg_type, msg_id, msg, *args, file_name=file_name,
                             fxn_name=fxn_name, line=line))
    return msg_id


def debug_enabled(condition, level) -> bool:
    """Whether a message at this level, or forced by condition, is shown."""
    return bool(condition) or bool(level and level <= _state.level)


def debug_msg(condition, level, msg, *args, stream=None) -> bool:
    """Conditionally write an informative or debugging message.

    Returns True when the message was written.
    """
    if not debug_enabled(condition, level):
        return False
    file_name, fxn_name, line = _call_site(1)
    msg_type = (MessageType.DEBUG_MSG if level >= Verbosity.DEBUG_I
                else MessageType.INFO_MSG)
    message(stream, msg_type, ErrorCode.NO_ERROR, msg, *args,
            file_name=file_name, fxn_name=fxn_name, line=line)
    return True


def check_time(start_time, time_limit, now=None, stream=None) -> float:
    """Return elapsed seconds; report and raise TimeoutError past the limit.

    A time limit of zero or None disables the check.
    """
    current = time.time() if now is None else now
    elapsed = current - start_time
    if time_limit and elapsed > time_limit:
        file_name, fxn_name, line = _call_site(1)
        message(stream, MessageType.ERROR_MSG, ErrorCode.OUT_OF_TIME, "",
                int(time_limit), file_name=file_name, fxn_name=fxn_name,
                line=line)
        raise TimeoutError(f"out of time after {elapsed:.0f}s")
    return elapsed