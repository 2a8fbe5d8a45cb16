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
"""The errors and warnings raised within and by Zeolite."""
from __future__ import annotations

__all__: list[str] = ["LoadError", "NotFoundError", "ProtocolError", "ZeoliteError"]

import typing

if typing.TYPE_CHECKING:
    import pathlib


class ZeoliteError(Exception):
    """The base class for all errors raised by Zeolite."""

    __slots__ = ()


class LoadError(ZeoliteError):
    """Error raised when a command or extension fails to load.

    This may be raised by the module failing to import, by it not exporting
    exactly one handler, by the handler failing to initialise, by a name
    conflict or by an extension's `on_load` hook erroring.

    When raised because of another error, the source error can be accessed at
    [LoadError.__cause__][zeolite.errors.LoadError.__cause__].
    """

    __slots__ = ("_message", "_path")

    def __init__(self, message: str, path: typing.Optional[pathlib.Path] = None, /) -> None:
        """Initialise a load error.

        Parameters
        ----------
        message
            String message which describes the error.
        path
            The path of the module which caused the error, if known.
        """
        super().__init__(message)
        self._message = message
        self._path = path

    @property
    def message(self) -> str:
        """The error message."""
        return self._message

    @property
    def path(self) -> typing.Optional[pathlib.Path]:
        """The path of the module which caused the error."""
        return self._path


class NotFoundError(ZeoliteError, LookupError):
    """Error raised when a command or extension name isn't registered."""

    __slots__ = ("_message", "_name")

    def __init__(self, message: str, name: str, /) -> None:
        """Initialise a not found error.

        Parameters
        ----------
        message
            String message which describes the error.
        name
            The name which couldn't be found.
        """
        super().__init__(message)
        self._message = message
        self._name = name

    def __str__(self) -> str:
        return self._message

    @property
    def message(self) -> str:
        """The error message."""
        return self._message

    @property
    def name(self) -> str:
        """The name which couldn't be found."""
        return self._name


class ProtocolError(ZeoliteError, RuntimeError):
    """Error raised when the middleware chain is misused.

    This is raised when a middleware calls its `next` callback more than once.
    """

    __slots__ = ()
