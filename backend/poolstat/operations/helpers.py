"""Run a command document over a binding and check the reply.

A reply is successful when its ``ok`` field is truthy.  Anything else,
including an exception from the binding itself, becomes a
``CommandError``.
"""

from typing import Any

from poolstat.core.exceptions import CommandError, PoolStatError
from poolstat.core.logging import logger
from poolstat.core.protocols.command import CommandSession, WriteBinding


def _check_reply(database: str, command: dict[str, Any], reply: Any) -> dict[str, Any]:
    name = next(iter(command), "<empty>")
    if not isinstance(reply, dict):
        raise CommandError(f"Command '{name}' on {database} returned no reply document")
    if not reply.get("ok"):
        message = reply.get("errmsg") or f"Command '{name}' on {database} failed"
        raise CommandError(message, code=reply.get("code"), reply=reply)
    return reply


def execute_wrapped_command(
    database: str, command: dict[str, Any], binding: WriteBinding
) -> dict[str, Any]:
    """Run ``command`` synchronously and return the successful reply.

    Raises:
        CommandError: If the binding fails or the server reports an error.
    """
    logger.debug(f"Executing command {next(iter(command), '<empty>')} on {database}")
    try:
        reply = binding.command(database, command)
    except PoolStatError:
        raise
    except Exception as e:
        raise CommandError(f"Command on {database} failed: {e}") from e
    return _check_reply(database, command, reply)


async def execute_wrapped_command_async(
    database: str, command: dict[str, Any], session: CommandSession
) -> dict[str, Any]:
    """Async counterpart of ``execute_wrapped_command``."""
    logger.debug(f"Executing command {next(iter(command), '<empty>')} on {database} (async)")
    try:
        reply = await session.command(database, command)
    except PoolStatError:
        raise
    except Exception as e:
        raise CommandError(f"Command on {database} failed: {e}") from e
    return _check_reply(database, command, reply)
