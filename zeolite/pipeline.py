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
"""The middleware chain commands are invoked through."""
from __future__ import annotations

__all__: list[str] = ["Pipeline"]

import logging
import typing

from . import _internal
from . import errors

if typing.TYPE_CHECKING:
    from collections import abc as collections

    import alluka
    from typing_extensions import Self

    from . import abc
    from . import context as context_

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite")


class _Chain:
    __slots__ = ("_ctx", "_injector", "_middlewares", "_terminal", "reached_terminal")

    def __init__(
        self,
        ctx: context_.Context,
        middlewares: collections.Sequence[abc.MiddlewareSig],
        terminal: abc.TerminalSig,
        injector: typing.Optional[alluka.abc.Client],
        /,
    ) -> None:
        self._ctx = ctx
        self._injector = injector
        self._middlewares = middlewares
        self._terminal = terminal
        self.reached_terminal = False

    async def call(self, index: int, /) -> None:
        if index < len(self._middlewares):
            middleware = self._middlewares[index]
            next_ = _Next(self, index)
            _LOGGER.log(_internal.TRACE, "Calling middleware %s (%r)", index, middleware)
            try:
                if self._injector:
                    await self._injector.call_with_async_di(middleware, self._ctx, next_)

                else:
                    await _internal.maybe_await(middleware(self._ctx, next_))

            except BaseException:
                next_.close()
                raise

            next_.check_awaited()

        elif index == len(self._middlewares):
            self.reached_terminal = True
            await self._terminal(self._ctx, _Next(self, index))


class _Next:
    __slots__ = ("_awaited", "_chain", "_coro", "_index")

    def __init__(self, chain: _Chain, index: int, /) -> None:
        self._awaited = False
        self._chain = chain
        self._coro: typing.Optional[collections.Coroutine[typing.Any, typing.Any, None]] = None
        self._index = index

    def __call__(self) -> collections.Coroutine[typing.Any, typing.Any, None]:
        if self._coro is not None:
            raise errors.ProtocolError(f"next() was called more than once by middleware {self._index}")

        self._coro = self._run()
        return self._coro

    async def _run(self) -> None:
        self._awaited = True
        await self._chain.call(self._index + 1)

    def close(self) -> None:
        if self._coro is not None and not self._awaited:
            self._coro.close()

    def check_awaited(self) -> None:
        if self._coro is not None and not self._awaited:
            self._coro.close()
            raise errors.ProtocolError(f"next() was called but never awaited by middleware {self._index}")


class Pipeline:
    """An ordered chain of middlewares ending with a terminal stage.

    Each middleware is called with the invocation context and a `next`
    callback; awaiting `next()` runs the rest of the chain while returning
    without calling it stops the chain. The chain is right-associative, so
    code after `await next()` runs after everything later in the chain.

    Examples
    --------
    ```py
    async def timing_middleware(ctx: zeolite.Context, next_: zeolite.abc.NextSig) -> None:
        start = time.perf_counter()
        await next_()
        print(f"{ctx.command.name} took {time.perf_counter() - start:.2f}s")

    pipeline = zeolite.Pipeline().add(timing_middleware)
    ```
    """

    __slots__ = ("_middlewares",)

    def __init__(self, middlewares: collections.Iterable[abc.MiddlewareSig] = (), /) -> None:
        """Initialise a pipeline.

        Parameters
        ----------
        middlewares
            The initial middlewares in the order they should be called in.
        """
        self._middlewares: list[abc.MiddlewareSig] = []
        for middleware in middlewares:
            self.add(middleware)

    def __len__(self) -> int:
        return len(self._middlewares)

    @property
    def middlewares(self) -> collections.Sequence[abc.MiddlewareSig]:
        """The middlewares in the order they're called in."""
        return tuple(self._middlewares)

    def add(self, middleware: abc.MiddlewareSig, /) -> Self:
        """Add a middleware to the end of the chain.

        Parameters
        ----------
        middleware
            The middleware to add.

        Returns
        -------
        Self
            The pipeline instance to enable chained calls.

        Raises
        ------
        TypeError
            If `middleware` isn't callable.
        """
        if not callable(middleware):
            raise TypeError(f"Middleware must be callable, not {type(middleware).__name__}")

        self._middlewares.append(middleware)
        return self

    def remove(self, middleware: abc.MiddlewareSig, /) -> Self:
        """Remove a middleware from the chain.

        This is a no-op if the middleware isn't in the chain.

        Parameters
        ----------
        middleware
            The middleware to remove.

        Returns
        -------
        Self
            The pipeline instance to enable chained calls.
        """
        try:
            self._middlewares.remove(middleware)

        except ValueError:
            _LOGGER.debug("Ignoring removal of unknown middleware %r", middleware)

        return self

    async def execute(
        self,
        ctx: context_.Context,
        terminal: abc.TerminalSig,
        /,
        *,
        injector: typing.Optional[alluka.abc.Client] = None,
    ) -> bool:
        """Run the middleware chain for an invocation.

        The chain is snapshotted when this is called, so adding or removing
        middlewares during execution doesn't affect this invocation.

        Parameters
        ----------
        ctx
            The context of the invocation.
        terminal
            The final stage of the chain.
        injector
            The dependency injection client to call middlewares with.

            If not provided then middlewares are called directly.

        Returns
        -------
        bool
            Whether the chain reached the terminal stage.

        Raises
        ------
        zeolite.errors.ProtocolError
            If a middleware calls `next` more than once or calls it without
            awaiting the result.
        """
        chain = _Chain(ctx, tuple(self._middlewares), terminal, injector)
        await chain.call(0)
        return chain.reached_terminal
