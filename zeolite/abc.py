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
"""Interfaces of the objects loaded and called by Zeolite's client."""
from __future__ import annotations

__all__: list[str] = [
    "Command",
    "Extension",
    "ListenerCallbackSig",
    "MiddlewareSig",
    "NextSig",
    "TerminalSig",
]

import abc
import typing
from collections import abc as collections

if typing.TYPE_CHECKING:
    from . import clients
    from . import commands
    from . import context as context_


_T = typing.TypeVar("_T")
_CoroT = collections.Coroutine[typing.Any, typing.Any, _T]
_MaybeAwaitable = typing.Union[collections.Awaitable[_T], _T]


NextSig = collections.Callable[[], _CoroT[None]]
"""Type hint of the continuation passed to each middleware.

Awaiting this runs the rest of the middleware chain (ending with the command).
"""

MiddlewareSig = collections.Callable[..., _MaybeAwaitable[None]]
"""Type hint of a middleware callback.

This will be called with the invocation's [zeolite.context.Context][] and a
[zeolite.abc.NextSig][] as its positional arguments, and may also declare
injected dependencies. This may either be synchronous or asynchronous and
stops the chain by returning without calling `next`.

Synchronous middlewares continue the chain by returning `next()`'s result;
calling `next` without the result being awaited raises
[zeolite.errors.ProtocolError][].
"""

TerminalSig = collections.Callable[..., _CoroT[None]]
"""Type hint of the terminal stage which the middleware chain ends with.

This is called with the context and a [zeolite.abc.NextSig][] (which is a no-op).
"""

ListenerCallbackSig = collections.Callable[..., _MaybeAwaitable[None]]
"""Type hint of a lifecycle event listener.

This will be called with the event object as its only positional argument and
may either be synchronous or asynchronous.
"""


class Command(abc.ABC):
    """Interface of a loadable command handler.

    A command module should export exactly one instance of this or one concrete
    subclass of this (which will be initialised with no arguments).
    """

    __slots__ = ()

    @property
    @abc.abstractmethod
    def definition(self) -> commands.CommandDefinition:
        """The immutable definition of this command."""

    @property
    def name(self) -> str:
        """The name of this command."""
        return self.definition.name

    def pre_load(self, client: clients.Client, /) -> bool:
        """Decide whether this command should be registered.

        This is called after the command is initialised but before it's
        registered.

        Parameters
        ----------
        client
            The client which is loading this command.

        Returns
        -------
        bool
            Whether this command should be registered.

            If this returns [False][] then the command will be returned by the
            registry without being registered.
        """
        return True

    @abc.abstractmethod
    async def run(self, ctx: context_.Context, /) -> None:
        """Execute this command.

        Parameters
        ----------
        ctx
            The context of the invocation.
        """

    def json(self) -> dict[str, typing.Any]:
        """Get the platform projection of this command's definition."""
        return self.definition.json()


class Extension(abc.ABC):
    """Interface of a loadable extension.

    An extension module should export exactly one instance of this or one
    concrete subclass of this (which will be initialised with no arguments).

    The lifecycle hooks may either be synchronous or asynchronous.
    """

    __slots__ = ()

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """The unique name of this extension."""

    def on_load(self, client: clients.Client, /) -> _MaybeAwaitable[None]:
        """Called before this extension is registered.

        Raising here will stop the extension from being registered.

        Parameters
        ----------
        client
            The client this extension is being loaded into.
        """

    def on_unload(self, client: clients.Client, /) -> _MaybeAwaitable[None]:
        """Called before this extension is unregistered.

        Parameters
        ----------
        client
            The client this extension is being unloaded from.
        """

    def on_exit(self, client: clients.Client, /) -> _MaybeAwaitable[None]:
        """Called when the client is closing.

        Parameters
        ----------
        client
            The client which is closing.
        """
