# pstretch/utils/progress.py

"""
Console progress reporting for the stretch engine, one ASCII bar per channel.
"""

from contextlib import ExitStack
from typing import IO, Optional

import click

BAR_WIDTH = 36


class ChannelProgress:
    """
    Adapts the engine's progress(iteration, max_iterations) callback to
    click progress bars.

    `start_channel(index, count)` is passed to the multichannel adapter as its
    `on_channel` hook: it finishes the previous channel's bar, and the next
    progress call opens a fresh one sized from that channel's max_iterations.
    """

    def __init__(self, file: Optional[IO] = None, hidden: bool = False):
        self._file = file
        self._hidden = hidden
        self._stack = ExitStack()
        self._bar = None
        self._label = ""
        self._position = 0
        self._length = 0

    def start_channel(self, index: int, count: int) -> None:
        self.finish()
        self._label = f"channel {index + 1}/{count}"

    def __call__(self, iteration: int, max_iterations: int) -> None:
        if self._hidden:
            return
        if self._bar is None:
            self._length = max(max_iterations, 1)
            self._position = 0
            self._bar = self._stack.enter_context(
                click.progressbar(
                    length=self._length,
                    label=self._label,
                    show_percent=True,
                    show_pos=False,
                    show_eta=False,
                    width=BAR_WIDTH,
                    fill_char="#",
                    empty_char="-",
                    file=self._file,
                )
            )
        # Iteration i is reported before it runs, so i iterations are complete
        advance = min(iteration, self._length) - self._position
        if advance > 0:
            self._bar.update(advance)
            self._position += advance

    def finish(self) -> None:
        """Fills and closes the current bar, if one is open."""
        if self._bar is not None:
            remaining = self._length - self._position
            if remaining > 0:
                self._bar.update(remaining)
            self._stack.close()
            self._stack = ExitStack()
            self._bar = None

    def __enter__(self) -> "ChannelProgress":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finish()
        else:
            self._stack.close()
            self._bar = None
