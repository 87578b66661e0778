"""
Base Command Handler
Abstract base for all command handlers
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from shared.application.base_command import BaseCommand
from shared.domain.result import Result
from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

TCommand = TypeVar("TCommand", bound=BaseCommand)
TResult = TypeVar("TResult")


class CommandHandler(ABC, Generic[TCommand, TResult]):
    """
    Abstract base class for command handlers.

    Command handlers validate raw input into value objects, drive the
    aggregate, and commit through a unit of work. Business-rule failures
    come back as a failed ``Result``; only faults raise.

    A handler holds one unit of work, so it serves one operation at a time;
    build a fresh handler per operation rather than sharing an instance
    across concurrent callers.

    Type Parameters:
        TCommand: Command type this handler processes
        TResult: Payload type of the returned Result

    Example:
        class AddNoteEventHandler(CommandHandler[AddNoteEventCommand, Event]):
            async def handle(self, command: AddNoteEventCommand) -> Result[Event]:
                ...
    """

    @abstractmethod
    async def handle(self, command: TCommand) -> Result[TResult]:
        """
        Handle the command and return result.

        Args:
            command: Command to execute

        Returns:
            Success with the handler payload, or Failure with the violated rule
        """

    async def __call__(self, command: TCommand) -> Result[TResult]:
        """
        Make handler callable directly.

        Adds logging around command execution.
        """
        command_name = command.__class__.__name__
        context = {
            "command": command_name,
            "command_id": str(command.command_id),
            "correlation_id": str(command.correlation_id),
        }

        logger.info(f"Executing command: {command_name}", extra=context)

        try:
            result = await self.handle(command)
        except Exception as e:
            logger.error(
                f"Command execution failed: {command_name}",
                extra={**context, "error": str(e)},
            )
            raise

        if result.is_failure():
            logger.warning(
                f"Command rejected: {command_name}",
                extra={**context, "error_code": result.error.code},
            )
        else:
            logger.info(f"Command executed successfully: {command_name}", extra=context)
        return result
