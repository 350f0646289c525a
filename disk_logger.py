#!/usr/bin/env python3
"""
Disk Status - Leveled Log Sink

Copyright (C) 2026 Magnus S. Modig

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.

Every message is decorated with a timestamp and a severity tag, shown on
the terminal when the verbosity settings allow it, and collected in a
scratch file for the current run. When the run ends the scratch file is
appended to the persistent log, which is never truncated.
"""

import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.text import Text

from decision_engine import Severity

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
UNSUCCESSFUL_RUN_MESSAGE = "disk-status did not finish running successfully."

SEVERITY_STYLES = {
    Severity.TRACE: 'blue',
    Severity.DEBUG: 'blue',
    Severity.INFO: 'blue',
    Severity.NOTICE: 'green',
    Severity.WARN: 'yellow',
    Severity.ERROR: 'red',
    Severity.FATAL: 'white on red',
}

# Terminal visibility switch for the quiet tiers
VERBOSITY_KEYS = {
    Severity.TRACE: 'trace',
    Severity.DEBUG: 'debug',
    Severity.INFO: 'verbose',
}


class FatalError(Exception):
    """A condition that ends the whole run"""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code or 1


def make_console(config: Dict[str, Any]) -> Console:
    """Console on stderr honoring the color settings"""
    color = config.get('color', True)
    return Console(
        stderr=True,
        force_terminal=True if config.get('force_terminal') else None,
        no_color=not color,
        highlight=False,
        soft_wrap=True,
    )


def timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def format_line(severity: Severity, message: str, stamp: str) -> str:
    """Plain decorated log line, e.g. '2026-01-02 03:04:05 [NOTICE]   /dev/sda'"""
    return f"{stamp} [{severity.tag}]   {message}"


class LeveledLogSink:
    """
    Accepts (severity, message) pairs.

    Args:
        config: 'logging' config section (trace, debug, verbose, color,
                force_terminal, log_file)
        console: Optional rich Console (tests pass one that records output)

    Usage:
        with LeveledLogSink(config) as sink:
            sink.notice("/dev/sda")
    """

    def __init__(self, config: Dict[str, Any], console: Optional[Console] = None):
        self.config = config
        self.console = console or make_console(config)
        self.log_file = Path(os.path.expanduser(config.get('log_file') or '~/.disk-status/disk-status.log'))
        self._buffer = None
        self._buffer_path = None

    # --- lifecycle -------------------------------------------------------

    def open(self):
        """Create the scratch buffer for this run"""
        try:
            fd, name = tempfile.mkstemp(prefix='disk-status-', suffix='.log')
            self._buffer = os.fdopen(fd, 'w', encoding='utf-8')
            self._buffer_path = Path(name)
        except OSError as e:
            message = f"Failed to create temporary log file: {e}"
            stamp = timestamp()
            self._render(Severity.FATAL, message, stamp)
            self._render(Severity.ERROR, UNSUCCESSFUL_RUN_MESSAGE, stamp)
            self._append_to_log([
                format_line(Severity.FATAL, message, stamp),
                format_line(Severity.ERROR, UNSUCCESSFUL_RUN_MESSAGE, stamp),
            ])
            raise FatalError(message) from e
        return self

    def close(self) -> bool:
        """
        Append the scratch buffer to the persistent log and remove it.

        Returns:
            True if the persistent log was written
        """
        if self._buffer is None:
            return False

        self._buffer.close()
        self._buffer = None
        try:
            with open(self._buffer_path, 'r', encoding='utf-8') as src:
                return self._append_to_log(src)
        except OSError as e:
            self.console.print(Text(f"Failed to read {self._buffer_path}: {e}", style='red'))
            return False
        finally:
            self._buffer_path.unlink(missing_ok=True)
            self._buffer_path = None

    def _append_to_log(self, source) -> bool:
        """Append a file object or a list of lines to the persistent log"""
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, 'a', encoding='utf-8') as dst:
                if isinstance(source, list):
                    dst.writelines(line + '\n' for line in source)
                else:
                    shutil.copyfileobj(source, dst)
        except OSError as e:
            self.console.print(Text(f"Failed to append to {self.log_file}: {e}", style='red'))
            return False
        return True

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None and not _is_clean_exit(exc):
            self.error(UNSUCCESSFUL_RUN_MESSAGE)
        self.close()
        return False

    # --- emitting --------------------------------------------------------

    def is_visible(self, severity: Severity) -> bool:
        """NOTICE and above always reach the terminal"""
        key = VERBOSITY_KEYS.get(severity)
        if key is None:
            return True
        return bool(self.config.get(key, False))

    def emit(self, severity: Severity, message: str):
        stamp = timestamp()
        if self._buffer is not None:
            self._buffer.write(format_line(severity, message, stamp) + '\n')
        if self.is_visible(severity):
            self._render(severity, message, stamp)

    def separator(self):
        """Blank line between device blocks"""
        if self._buffer is not None:
            self._buffer.write('\n')
        self.console.print()

    def _render(self, severity: Severity, message: str, stamp: str):
        text = Text(f"{stamp} ")
        text.append(f"[{severity.tag}]", style=SEVERITY_STYLES[severity])
        text.append(f"   {message}")
        self.console.print(text)

    def trace(self, message: str):
        self.emit(Severity.TRACE, message)

    def debug(self, message: str):
        self.emit(Severity.DEBUG, message)

    def info(self, message: str):
        self.emit(Severity.INFO, message)

    def notice(self, message: str):
        self.emit(Severity.NOTICE, message)

    def warn(self, message: str):
        self.emit(Severity.WARN, message)

    def error(self, message: str):
        self.emit(Severity.ERROR, message)

    def fatal(self, message: str, exit_code: int = 1):
        """Log at FATAL and end the run"""
        self.emit(Severity.FATAL, message)
        raise FatalError(message, exit_code)


def _is_clean_exit(exc: BaseException) -> bool:
    return isinstance(exc, SystemExit) and exc.code in (0, None)
