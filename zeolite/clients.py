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
"""Zeolite's standard command client and dispatcher."""
from __future__ import annotations

__all__: list[str] = ["Client"]

import logging
import pathlib
import typing
import urllib.parse
from collections import abc as collections

import alluka
import hikari

from . import _internal
from . import context
from . import cooldowns as cooldowns_
from . import errors
from . import events as events_
from . import gates
from . import localisation
from . import owners as owners_
from . import permissions as permissions_
from . import pipeline
from . import registries

if typing.TYPE_CHECKING:
    import types

    from typing_extensions import Self

    from . import abc

    _ListenerCallbackSigT = typing.TypeVar("_ListenerCallbackSigT", bound=abc.ListenerCallbackSig)
    _MiddlewareSigT = typing.TypeVar("_MiddlewareSigT", bound=abc.MiddlewareSig)
    _T = typing.TypeVar("_T")

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite")

_DEFAULT_SCOPES: typing.Final[tuple[str, ...]] = ("bot", "applications.commands")
_INVITE_URL: typing.Final[str] = "https://discord.com/api/oauth2/authorize"


def _try_unsubscribe(
    event_manager: hikari.api.EventManager,
    event_type: type[hikari.Event],
    callback: collections.Callable[..., collections.Coroutine[typing.Any, typing.Any, None]],
) -> None:
    try:
        event_manager.unsubscribe(event_type, callback)
    except (ValueError, LookupError):
        _LOGGER.debug("%r wasn't subscribed to %s", callback, event_type.__name__)


class Client:
    """Zeolite's standard command client.

    This receives command interactions, resolves them to registered commands,
    runs them through the middleware chain (which ends with the owner, guild,
    cooldown and permission gates) and reports the outcome as lifecycle events.

    Unlike Hikari's events, lifecycle events are dispatched through the client
    itself; see [Client.add_listener][zeolite.clients.Client.add_listener].
    """

    __slots__ = (
        "_application_id",
        "_cache",
        "_commands",
        "_cooldowns",
        "_declare_commands",
        "_dispatcher",
        "_event_managed",
        "_events",
        "_extensions",
        "_injector",
        "_is_alive",
        "_localiser",
        "_owners",
        "_permissions",
        "_pipeline",
        "_rest",
    )

    def __init__(
        self,
        rest: hikari.api.RESTClient,
        *,
        cache: typing.Optional[hikari.api.Cache] = None,
        events: typing.Optional[hikari.api.EventManager] = None,
        event_managed: bool = False,
        injector: typing.Optional[alluka.abc.Client] = None,
        owners: typing.Optional[hikari.SnowflakeishSequence[hikari.User]] = None,
        owner_check: typing.Optional[owners_.AbstractOwners] = None,
        permission_checker: typing.Optional[permissions_.AbstractPermissionChecker] = None,
        cooldowns: typing.Optional[cooldowns_.CooldownTracker] = None,
        default_language: str = localisation.DEFAULT_LANGUAGE,
        language_provider: typing.Optional[localisation.AbstractLanguageProvider] = None,
        declare_commands: typing.Union[hikari.SnowflakeishOr[hikari.PartialGuild], bool] = False,
        commands_dir: typing.Optional[typing.Union[str, pathlib.Path]] = None,
        extensions_dir: typing.Optional[typing.Union[str, pathlib.Path]] = None,
    ) -> None:
        """Initialise a Zeolite client.

        !!! note
            For a quicker way to initiate this client around a standard bot aware
            client, see [zeolite.Client.from_gateway_bot][].

        Parameters
        ----------
        rest
            The Hikari REST client this will use.
        cache
            The Hikari cache client this will use if applicable.
        events
            The Hikari event manager client this will use if applicable.

            This is necessary for receiving command interactions from the
            gateway and for collecting component interactions.
        event_managed
            Whether or not this client is managed by the event manager.

            An event managed client will be automatically started and closed based
            on Hikari's lifetime events.

            This can only be passed as [True][] if `events` is also provided.
        injector
            The alluka client this should use for dependency injection.

            If not provided then the client will initialise its own DI client.
        owners
            IDs or objects of the users which should be treated as the bot's owners.

            If this is empty then owner checks fall back to the application's
            owner or team members.
        owner_check
            Custom owner check to use instead of the standard one built from `owners`.
        permission_checker
            Custom permission checker to use.

            If not provided then the permissions sent with the interaction are used.
        cooldowns
            Cooldown tracker to use.

            If not provided then a new one is made.
        default_language
            The language localised strings fall back to.
        language_provider
            Provider of the languages users should receive localised strings in.
        declare_commands
            Whether or not to automatically declare the loaded commands when this
            client is first started.

            If a guild object/ID is passed here then the commands will be declared
            on that guild rather than globally.
        commands_dir
            The directory relative command paths are resolved against.
        extensions_dir
            The directory relative extension paths are resolved against.

        Raises
        ------
        ValueError
            If `event_managed` is passed as [True][] when `events` is [None][].
        """
        if event_managed and not events:
            raise ValueError("Client can only be event managed if an event manager is passed")

        self._application_id: typing.Optional[hikari.Snowflake] = None
        self._cache = cache
        self._commands = registries.CommandRegistry(self, directory=commands_dir)
        self._cooldowns = cooldowns if cooldowns is not None else cooldowns_.CooldownTracker()
        self._declare_commands = declare_commands
        self._dispatcher = events_.EventDispatcher()
        self._event_managed = event_managed
        self._events = events
        self._extensions = registries.ExtensionRegistry(self, directory=extensions_dir)
        self._injector = injector or alluka.Client()
        self._is_alive = False
        self._localiser = localisation.LocalisationManager(self, default_language=default_language)
        self._owners = owner_check or owners_.Owners(owners=owners)
        self._permissions = permission_checker or permissions_.InteractionPermissionChecker()
        self._pipeline = pipeline.Pipeline()
        self._rest = rest

        if event_managed:
            assert events
            events.subscribe(hikari.StartingEvent, self._on_starting_event)
            events.subscribe(hikari.StartedEvent, self._on_started_event)
            events.subscribe(hikari.StoppingEvent, self._on_stopping_event)

        if language_provider:
            self._localiser.set_language_provider(language_provider)

        (
            self._injector.set_type_dependency(Client, self)
            .set_type_dependency(registries.CommandRegistry, self._commands)
            .set_type_dependency(registries.ExtensionRegistry, self._extensions)
            .set_type_dependency(cooldowns_.CooldownTracker, self._cooldowns)
            .set_type_dependency(owners_.AbstractOwners, self._owners)
            .set_type_dependency(permissions_.AbstractPermissionChecker, self._permissions)
            .set_type_dependency(localisation.LocalisationManager, self._localiser)
            .set_type_dependency(hikari.api.RESTClient, rest)
        )
        if cache:
            self._injector.set_type_dependency(hikari.api.Cache, cache)

        if events:
            self._injector.set_type_dependency(hikari.api.EventManager, events)

    @classmethod
    def from_gateway_bot(
        cls,
        bot: hikari.GatewayBotAware,
        /,
        *,
        event_managed: bool = True,
        injector: typing.Optional[alluka.abc.Client] = None,
        owners: typing.Optional[hikari.SnowflakeishSequence[hikari.User]] = None,
        owner_check: typing.Optional[owners_.AbstractOwners] = None,
        permission_checker: typing.Optional[permissions_.AbstractPermissionChecker] = None,
        default_language: str = localisation.DEFAULT_LANGUAGE,
        language_provider: typing.Optional[localisation.AbstractLanguageProvider] = None,
        declare_commands: typing.Union[hikari.SnowflakeishOr[hikari.PartialGuild], bool] = False,
        commands_dir: typing.Optional[typing.Union[str, pathlib.Path]] = None,
        extensions_dir: typing.Optional[typing.Union[str, pathlib.Path]] = None,
    ) -> Client:
        """Build a [zeolite.Client][] from a gateway bot.

        Parameters
        ----------
        bot
            The bot client to build from.

            This will be used to infer the relevant Hikari clients to use.
        event_managed
            Whether or not this client is managed by the event manager.

            An event managed client will be automatically started and closed
            based on Hikari's lifetime events.
        injector
            The alluka client this should use for dependency injection.
        owners
            IDs or objects of the users which should be treated as the bot's owners.
        owner_check
            Custom owner check to use instead of the standard one built from `owners`.
        permission_checker
            Custom permission checker to use.
        default_language
            The language localised strings fall back to.
        language_provider
            Provider of the languages users should receive localised strings in.
        declare_commands
            Whether or not to automatically declare the loaded commands when
            the bot has started.

            If a guild object/ID is passed here then the commands will be declared
            on that guild rather than globally.
        commands_dir
            The directory relative command paths are resolved against.
        extensions_dir
            The directory relative extension paths are resolved against.

        Returns
        -------
        Client
            The created client.
        """
        return cls(
            rest=bot.rest,
            cache=bot.cache,
            events=bot.event_manager,
            event_managed=event_managed,
            injector=injector,
            owners=owners,
            owner_check=owner_check,
            permission_checker=permission_checker,
            default_language=default_language,
            language_provider=language_provider,
            declare_commands=declare_commands,
            commands_dir=commands_dir,
            extensions_dir=extensions_dir,
        ).set_type_dependency(hikari.GatewayBotAware, bot)

    async def __aenter__(self) -> Client:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: typing.Optional[type[BaseException]],
        exc: typing.Optional[BaseException],
        exc_traceback: typing.Optional[types.TracebackType],
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"Client <{len(self._commands)} commands, {len(self._extensions)} extensions>"

    @property
    def application_id(self) -> typing.Optional[hikari.Snowflake]:
        """ID of the bot's application, if it's been fetched yet."""
        return self._application_id

    @property
    def cache(self) -> typing.Optional[hikari.api.Cache]:
        """The Hikari cache client this client is bound to, if set."""
        return self._cache

    @property
    def commands(self) -> registries.CommandRegistry:
        """Registry of the commands this client dispatches to."""
        return self._commands

    @property
    def cooldowns(self) -> cooldowns_.CooldownTracker:
        """The per-user command cooldown tracker."""
        return self._cooldowns

    @property
    def events(self) -> typing.Optional[hikari.api.EventManager]:
        """The Hikari event manager this client is bound to, if set."""
        return self._events

    @property
    def extensions(self) -> registries.ExtensionRegistry:
        """Registry of the extensions loaded into this client."""
        return self._extensions

    @property
    def injector(self) -> alluka.abc.Client:
        """The alluka client this uses for dependency injection."""
        return self._injector

    @property
    def is_alive(self) -> bool:
        """Whether this client is running."""
        return self._is_alive

    @property
    def listeners(
        self,
    ) -> collections.Mapping[type[events_.LifecycleEvent], collections.Sequence[abc.ListenerCallbackSig]]:
        """Mapping of lifecycle event types to the listeners registered for them."""
        return self._dispatcher.listeners

    @property
    def localiser(self) -> localisation.LocalisationManager:
        """The manager used to get localised strings for users."""
        return self._localiser

    @property
    def middlewares(self) -> collections.Sequence[abc.MiddlewareSig]:
        """The middlewares invocations pass through in the order they're called."""
        return self._pipeline.middlewares

    @property
    def owners(self) -> owners_.AbstractOwners:
        """The owner check used for owner only commands."""
        return self._owners

    @property
    def permissions(self) -> permissions_.AbstractPermissionChecker:
        """The permission checker used for commands which require permissions."""
        return self._permissions

    @property
    def rest(self) -> hikari.api.RESTClient:
        """The Hikari REST client this client is bound to."""
        return self._rest

    def set_type_dependency(self, type_: type[_T], value: _T, /) -> Self:
        """Set a type dependency for commands and middlewares to inject.

        Parameters
        ----------
        type_
            The type of the dependency.
        value
            The value of the dependency.

        Returns
        -------
        Self
            The client instance to enable chained calls.
        """
        self._injector.set_type_dependency(type_, value)
        return self

    def add_middleware(self, middleware: abc.MiddlewareSig, /) -> Self:
        """Add a middleware to the end of the invocation chain.

        Parameters
        ----------
        middleware
            The middleware to add.

            This is called with the context and a `next` callback which runs
            the rest of the chain, and may declare injected dependencies.

        Returns
        -------
        Self
            The client instance to enable chained calls.

        Raises
        ------
        TypeError
            If `middleware` isn't callable.
        """
        self._pipeline.add(middleware)
        return self

    def remove_middleware(self, middleware: abc.MiddlewareSig, /) -> Self:
        """Remove a middleware from the invocation chain.

        This is a no-op if the middleware isn't registered.

        Returns
        -------
        Self
            The client instance to enable chained calls.
        """
        self._pipeline.remove(middleware)
        return self

    def with_middleware(self, middleware: _MiddlewareSigT, /) -> _MiddlewareSigT:
        """Add a middleware through a decorator call.

        Examples
        --------
        ```py
        @client.with_middleware
        async def log_middleware(ctx: zeolite.Context, next_: zeolite.abc.NextSig) -> None:
            print(f"{ctx.user} used {ctx.command.name}")
            await next_()
        ```
        """
        self.add_middleware(middleware)
        return middleware

    def add_listener(self, event_type: type[events_.LifecycleEvent], callback: abc.ListenerCallbackSig, /) -> Self:
        """Add a lifecycle event listener.

        Parameters
        ----------
        event_type
            The lifecycle event type to listen for.

            Listeners for [zeolite.events.LifecycleEvent][] receive all events.
        callback
            The listener callback; errors it raises are logged.

        Returns
        -------
        Self
            The client instance to enable chained calls.
        """
        self._dispatcher.subscribe(event_type, callback)
        return self

    def remove_listener(self, event_type: type[events_.LifecycleEvent], callback: abc.ListenerCallbackSig, /) -> Self:
        """Remove a lifecycle event listener.

        Raises
        ------
        KeyError
            If the callback isn't registered for the event type.
        """
        self._dispatcher.unsubscribe(event_type, callback)
        return self

    def with_listener(
        self, *event_types: type[events_.LifecycleEvent]
    ) -> collections.Callable[[_ListenerCallbackSigT], _ListenerCallbackSigT]:
        """Add a lifecycle event listener through a decorator call.

        Examples
        --------
        ```py
        @client.with_listener(zeolite.events.CommandCooldownEvent)
        async def on_cooldown(event: zeolite.events.CommandCooldownEvent) -> None:
            await event.ctx.respond(f"Try again in {event.seconds_left} seconds")
        ```

        Parameters
        ----------
        *event_types
            One or more lifecycle event types to listen for.

        Raises
        ------
        ValueError
            If no event types are passed.
        """
        if not event_types:
            raise ValueError("Must pass at least one event type")

        def decorator(callback: _ListenerCallbackSigT, /) -> _ListenerCallbackSigT:
            for event_type in event_types:
                self.add_listener(event_type, callback)

            return callback

        return decorator

    async def dispatch_event(self, event: events_.LifecycleEvent, /) -> None:
        """Dispatch a lifecycle event to its listeners."""
        await self._dispatcher.dispatch(event)

    async def open(self, *, register_listeners: bool = True) -> None:
        """Start the client.

        If `declare_commands` was passed and this client isn't event managed
        then this will declare the loaded commands.

        Raises
        ------
        RuntimeError
            If the client is already active.
        """
        if self._is_alive:
            raise RuntimeError("Client is already alive")

        self._is_alive = True
        if register_listeners and self._events:
            self._events.subscribe(hikari.InteractionCreateEvent, self.on_interaction_create_event)

        if not self._event_managed and self._declare_commands is not False:
            await self._declare_startup_commands()

        _LOGGER.info("Client started with %s commands", len(self._commands))

    async def close(self, *, deregister_listeners: bool = True) -> None:
        """Close the client.

        This calls every loaded extension's `on_exit` hook and cancels the
        scheduled cooldown removals.

        Raises
        ------
        RuntimeError
            If the client isn't running.
        """
        if not self._is_alive:
            raise RuntimeError("Client isn't active")

        if deregister_listeners and self._events:
            _try_unsubscribe(self._events, hikari.InteractionCreateEvent, self.on_interaction_create_event)

        await self._extensions.run_exit_hooks()
        self._cooldowns.close()
        self._is_alive = False
        _LOGGER.info("Client closed")

    async def _on_starting_event(self, _: hikari.StartingEvent, /) -> None:
        await self.open()

    async def _on_started_event(self, _: hikari.StartedEvent, /) -> None:
        if self._declare_commands is not False:
            await self._declare_startup_commands()

    async def _on_stopping_event(self, _: hikari.StoppingEvent, /) -> None:
        await self.close()

    @_internal.log_task_exc("Failed to declare application commands at startup")
    async def _declare_startup_commands(self) -> None:
        guild = self._declare_commands if not isinstance(self._declare_commands, bool) else hikari.UNDEFINED
        await self.declare_commands(guild=guild)

    async def fetch_application_id(self) -> hikari.Snowflake:
        """Fetch the ID of the application this client is bound to.

        This is cached after the first call.

        Returns
        -------
        hikari.Snowflake
            The application's ID.
        """
        if self._application_id:
            return self._application_id

        if self._rest.token_type == hikari.TokenType.BEARER:
            self._application_id = (await self._rest.fetch_authorization()).application.id

        else:
            self._application_id = (await self._rest.fetch_application()).id

        return self._application_id

    def _build_command(self, command: abc.Command, /) -> hikari.api.SlashCommandBuilder:
        definition = command.definition
        builder = self._rest.slash_command_builder(definition.name, definition.description)
        for option in definition.options:
            builder.add_option(option)

        if definition.name_localizations:
            builder.set_name_localizations(dict(definition.name_localizations))

        if definition.description_localizations:
            builder.set_description_localizations(dict(definition.description_localizations))

        if definition.required_permissions:
            builder.set_default_member_permissions(definition.required_permissions)

        return builder

    async def declare_commands(
        self, *, guild: hikari.UndefinedOr[hikari.SnowflakeishOr[hikari.PartialGuild]] = hikari.UNDEFINED
    ) -> collections.Sequence[hikari.PartialCommand]:
        """Declare the loaded commands, replacing any previously declared commands.

        !!! warning
            This endpoint has a strict ratelimit which, as of writing, only
            allows for 2 requests per minute (with that ratelimit either being
            per-guild if targeting a specific guild otherwise globally).

        Parameters
        ----------
        guild
            Object or ID of the guild to declare the commands in.

            If left as [hikari.UNDEFINED][] then the commands are declared globally.

        Returns
        -------
        collections.abc.Sequence[hikari.PartialCommand]
            API representations of the declared commands.
        """
        builders = [self._build_command(command) for command in self._commands.commands.values()]
        application = await self.fetch_application_id()
        declared = await self._rest.set_application_commands(application, builders, guild=guild)

        if guild:
            _LOGGER.info("Declared %s application commands in guild %s", len(declared), hikari.Snowflake(guild))

        else:
            _LOGGER.info("Declared %s global application commands", len(declared))

        return declared

    async def update_command(
        self, name: str, /, *, guild: hikari.UndefinedOr[hikari.SnowflakeishOr[hikari.PartialGuild]] = hikari.UNDEFINED
    ) -> hikari.SlashCommand:
        """Declare a single loaded command, replacing any declared command with the same name.

        Parameters
        ----------
        name
            Name of the command to declare.
        guild
            Object or ID of the guild to declare the command in.

            If left as [hikari.UNDEFINED][] then the command is declared globally.

        Returns
        -------
        hikari.SlashCommand
            API representation of the declared command.

        Raises
        ------
        zeolite.errors.NotFoundError
            If the command isn't loaded.
        """
        command = self._commands.get(name)
        if command is None:
            raise errors.NotFoundError(f"Command {name} does not exist", name)

        definition = command.definition
        application = await self.fetch_application_id()
        declared = await self._rest.create_slash_command(
            application,
            definition.name,
            definition.description,
            guild=guild,
            options=list(definition.options),
            name_localizations=dict(definition.name_localizations),
            description_localizations=dict(definition.description_localizations),
            default_member_permissions=definition.required_permissions or hikari.UNDEFINED,
        )
        _LOGGER.info("Updated application command %s", name)
        return declared

    async def generate_invite(
        self,
        *,
        permissions: hikari.Permissions = hikari.Permissions.NONE,
        scopes: collections.Sequence[str] = _DEFAULT_SCOPES,
    ) -> str:
        """Generate an OAuth2 invite link for the bot.

        Parameters
        ----------
        permissions
            The permissions to request for the bot.
        scopes
            The OAuth2 scopes to request.

        Returns
        -------
        str
            The invite URL.
        """
        application = await self.fetch_application_id()
        query = urllib.parse.urlencode(
            {"client_id": application, "permissions": int(permissions), "scope": " ".join(scopes)},
            quote_via=urllib.parse.quote,
        )
        return f"{_INVITE_URL}?{query}"

    async def on_interaction_create_event(self, event: hikari.InteractionCreateEvent, /) -> None:
        """Handle a gateway interaction create event.

        Parameters
        ----------
        event
            The event to execute commands based on.
        """
        await self.dispatch(event.interaction)

    async def dispatch(self, interaction: hikari.PartialInteraction, /) -> typing.Optional[context.InvocationState]:
        """Execute a command based on an interaction.

        Errors raised by middlewares or the command are logged and dispatched
        as [zeolite.events.CommandErrorEvent][]s rather than propagated.

        Parameters
        ----------
        interaction
            The interaction to execute a command based on.

            Only command interactions are handled.

        Returns
        -------
        zeolite.context.InvocationState | None
            The state the invocation finished in, or [None][] if the interaction
            was ignored or didn't match a loaded command.
        """
        if not isinstance(interaction, hikari.CommandInteraction):
            return None

        _LOGGER.log(_internal.TRACE, "Received interaction %s for command %s", interaction.id, interaction.command_name)
        command = self._commands.get(interaction.command_name)
        if command is None:
            _LOGGER.log(_internal.TRACE, "Dropping interaction for unknown command %s", interaction.command_name)
            return None

        ctx = context.Context(self, interaction, command)
        ctx.set_state(context.InvocationState.PIPED)
        try:
            reached_command = await self._pipeline.execute(ctx, self._run_command, injector=self._injector)

        except Exception as exc:
            _LOGGER.error("Invocation of command %s raised an exception", command.name, exc_info=exc)
            if not ctx.state.is_terminal:
                ctx.set_state(context.InvocationState.ERRORED)

            await self._dispatcher.dispatch(events_.CommandErrorEvent(ctx, exc))
            return ctx.state

        if not reached_command:
            _LOGGER.debug("Invocation of command %s was halted by a middleware", command.name)
            ctx.set_state(context.InvocationState.HALTED)

        return ctx.state

    async def _run_command(self, ctx: context.Context, _: abc.NextSig, /) -> None:
        rejection = await gates.evaluate_gates(
            ctx, owners=self._owners, cooldowns=self._cooldowns, permissions=self._permissions
        )
        if rejection:
            ctx.set_state(context.InvocationState.GATE_REJECTED)
            await self._dispatcher.dispatch(rejection)
            return

        await ctx.command.run(ctx)
        if cooldown := ctx.command.definition.cooldown:
            self._cooldowns.start(ctx.command.name, ctx.user.id, cooldown)

        ctx.set_state(context.InvocationState.SUCCEEDED)
        _LOGGER.debug("Command %s succeeded for %s", ctx.command.name, ctx.user.id)
        await self._dispatcher.dispatch(events_.CommandSuccessEvent(ctx))
