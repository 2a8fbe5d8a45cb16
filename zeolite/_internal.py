# -*- coding: utf-8 -*-
# cython: language_level=3
# BSD 3-Clause License
#
# Copyright (c) 2020-2022, Faster Speeding
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice, this
#   list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of the copyright holder nor the names of its
#   contributors may be used to endorse or promote products derived from
#   this software without specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
# DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE
# FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
# DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
# SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
# OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
# OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
"""Internal utility functions used within Zeolite."""
from __future__ import annotations

__all__: list[str] = []

import functools
import inspect
import logging
import pathlib
import types
import typing
from collections import abc as collections

from . import errors

if typing.TYPE_CHECKING:
    from typing_extensions import ParamSpec

    _P = ParamSpec("_P")

_T = typing.TypeVar("_T")
_CoroT = collections.Coroutine[typing.Any, typing.Any, _T]

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite")

TRACE: typing.Final[int] = logging.DEBUG - 5
"""Per-interaction logging level; this matches Hikari's trace level."""


async def maybe_await(value: typing.Union[collections.Awaitable[_T], _T], /) -> _T:
    """Await the value if it's awaitable, otherwise return it as-is."""
    if inspect.isawaitable(value):
        return await value

    return value


def log_task_exc(
    message: str, /
) -> collections.Callable[[collections.Callable[_P, collections.Awaitable[_T]]], collections.Callable[_P, _CoroT[_T]]]:
    """Log the exception when a task raises instead of leaving it up to the gods."""

    def decorator(
        callback: collections.Callable[_P, collections.Awaitable[_T]], /
    ) -> collections.Callable[_P, _CoroT[_T]]:
        @functools.wraps(callback)
        async def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _T:
            try:
                return await callback(*args, **kwargs)

            except Exception as exc:
                _LOGGER.exception(message, exc_info=exc)
                raise

        return wrapper

    return decorator


def normalize_path(path: pathlib.Path, /) -> pathlib.Path:
    try:
        path = path.expanduser()
    except RuntimeError:
        pass  # A home directory couldn't be resolved, so we'll just use the path as-is.

    return path.resolve()


def scan_directory(directory: pathlib.Path, /) -> list[pathlib.Path]:
    """Get the loadable source files directly within a directory.

    Files starting with `_` (including `__init__.py`) are skipped and the
    result is sorted by name.
    """
    return sorted(
        path for path in directory.glob("*.py") if path.is_file() and not path.name.startswith("_")
    )


class WrapLoadError:
    """Context manager which wraps errors raised within it in a [zeolite.errors.LoadError][]."""

    __slots__ = ("_message", "_path")

    def __init__(self, message: str, path: pathlib.Path, /) -> None:
        self._message = message
        self._path = path

    def __enter__(self) -> None:
        pass

    def __exit__(
        self,
        exc_type: typing.Optional[type[BaseException]],
        exc: typing.Optional[BaseException],
        exc_tb: typing.Optional[types.TracebackType],
    ) -> None:
        if exc and isinstance(exc, Exception) and not isinstance(exc, errors.LoadError):
            raise errors.LoadError(self._message, self._path) from exc  # noqa: R102

