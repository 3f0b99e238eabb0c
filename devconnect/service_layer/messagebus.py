from __future__ import annotations

import logging
from typing import Callable, Dict, List, Type, Union
import uuid

from devconnect.domain import commands, events
from devconnect.service_layer import unit_of_work

logger = logging.getLogger(__name__)

Message = Union[commands.Command, events.Event]


class MessageBus:
    """Dispatches a message and the events it raises.

    Every call to ``handle`` opens its own unit of work from ``uow_factory``
    and hands it to the handlers, so concurrent messages never share a session.
    """

    def __init__(
        self,
        uow_factory: Callable[[], unit_of_work.AbstractUnitOfWork],
        event_handlers: Dict[Type[events.Event], List[Callable]],
        command_handlers: Dict[Type[commands.Command], Callable],
    ) -> None:
        self.uow_factory = uow_factory
        self.event_handlers = event_handlers
        self.command_handlers = command_handlers

    def handle(self, message: Message) -> List:
        results = []
        queue: List[Message] = [message]
        message_id = uuid.uuid4()
        uow = self.uow_factory()
        logger.debug("message %s received: %s", message_id, message)

        while queue:
            message = queue.pop(0)
            if isinstance(message, events.Event):
                self._handle_event(message, queue, message_id, uow)
            elif isinstance(message, commands.Command):
                result = self._handle_command(message, queue, message_id, uow)
                results.append(result)
            else:
                raise Exception(f"{message} was not an Event or Command")

        return results

    def _handle_event(self, event: events.Event, queue: List[Message], message_id, uow) -> None:
        for handler in self.event_handlers.get(type(event), []):
            try:
                logger.debug("message %s handling event %s with handler %s", message_id, event, handler)
                handler(event, uow=uow)
                queue.extend(uow.collect_new_events())
            except Exception:
                logger.exception("message %s exception handling event %s", message_id, event)
                continue

    def _handle_command(self, command: commands.Command, queue: List[Message], message_id, uow):
        logger.debug("message %s handling command %s", message_id, command)
        handler = self.command_handlers.get(type(command))
        if handler is None:
            raise Exception(f"No handler for command type {type(command)}")
        try:
            result = handler(command, uow=uow)
        except Exception:
            # drop events recorded by a command that did not commit
            uow.collect_new_events()
            raise
        queue.extend(uow.collect_new_events())
        return result
