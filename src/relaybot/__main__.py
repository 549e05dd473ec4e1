"""アプリケーションのエントリポイント"""

import asyncio
import logging
import os
import signal
import sys
from pathlib import Path

from relaybot.application.handlers import MessageEventHandler
from relaybot.application.services import ConversationRegistry
from relaybot.application.use_cases import Responder
from relaybot.config import (
    ConfigError,
    LoggingConfig,
    compile_trigger_pattern,
    load_config,
)
from relaybot.infrastructure.events import EventDispatcher, EventLoop, EventQueue
from relaybot.infrastructure.generator import create_text_generator
from relaybot.infrastructure.http import HealthServer
from relaybot.infrastructure.irc import (
    IRCConnection,
    IRCConnectionError,
    IRCEventAdapter,
    IRCMessagingService,
)
from relaybot.presentation import register_handlers

# Default logging for early startup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "RELAYBOT_CONFIG"


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        return

    root_logger = logging.getLogger()
    level = getattr(logging, config.level.upper(), logging.INFO)
    root_logger.setLevel(level)

    if root_logger.handlers:
        formatter = logging.Formatter(config.format)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    if config.loggers:
        for logger_name, logger_level in config.loggers.items():
            individual_logger = logging.getLogger(logger_name)
            individual_level = getattr(logging, logger_level.upper(), logging.INFO)
            individual_logger.setLevel(individual_level)
            logger.debug(
                "Set logger '%s' to level %s", logger_name, logger_level.upper()
            )


def resolve_config_path() -> Path:
    """設定ファイルのパスを決定する（RELAYBOT_CONFIG で上書き可能）"""
    return Path(os.environ.get(CONFIG_PATH_ENV) or "config.yaml")


async def main() -> None:
    """アプリケーションを起動する"""
    config_path = resolve_config_path()
    if not config_path.exists():
        logger.error("%s not found", config_path)
        sys.exit(1)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error("Failed to load config: %s", e)
        sys.exit(1)

    configure_logging(config.logging)

    # Build dependencies
    debug_prompts = bool(config.logging and config.logging.debug_prompts)
    text_generator = create_text_generator(config.generator, debug_prompts=debug_prompts)
    conversations = ConversationRegistry(
        persona_text=config.persona.system_prompt,
        capacity=config.response.context_capacity,
    )
    responder = Responder(
        text_generator=text_generator,
        conversations=conversations,
        bot_nick=config.irc.nick,
        trigger_pattern=compile_trigger_pattern(config.response.trigger_pattern),
        filler_text=config.response.filler_text,
    )

    connection = IRCConnection(config.irc)
    messaging_service = IRCMessagingService(connection)
    message_handler = MessageEventHandler(
        responder=responder,
        messaging_service=messaging_service,
        max_line_length=config.response.max_line_length,
        send_interval_seconds=config.response.send_interval_seconds,
    )

    event_queue = EventQueue()
    dispatcher = EventDispatcher()
    dispatcher.register_handler(message_handler.handle)
    event_loop = EventLoop(event_queue, dispatcher)

    event_adapter = IRCEventAdapter(current_nick=lambda: connection.nick)
    register_handlers(connection, event_adapter, event_queue)

    logger.info("Starting IRC bot...")
    logger.info("Server: %s:%d", config.irc.server, config.irc.port)
    logger.info("Channel: %s", config.irc.channel)
    logger.info("Nick: %s", config.irc.nick)
    logger.info("Generator backend: %s", config.generator.backend)

    try:
        await connection.connect()
    except IRCConnectionError as e:
        logger.error("Failed to connect: %s", e)
        sys.exit(1)

    health_server: HealthServer | None = None
    if config.health is not None:
        health_server = HealthServer(
            event_loop=event_loop,
            event_queue=event_queue,
            irc_connection=connection,
            port=config.health.port,
        )
        await health_server.start()

    # Create tasks
    irc_task = asyncio.create_task(connection.run_forever())
    loop_task = asyncio.create_task(event_loop.start())

    # Setup signal handlers for graceful shutdown
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def shutdown_handler() -> None:
        logger.info("Received shutdown signal...")
        stop_event.set()

    loop.add_signal_handler(signal.SIGINT, shutdown_handler)
    loop.add_signal_handler(signal.SIGTERM, shutdown_handler)

    # Stop on signal or if the IRC task ends unexpectedly
    def on_irc_done(task: asyncio.Task[None]) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("IRC task failed: %s", task.exception())
        stop_event.set()

    irc_task.add_done_callback(on_irc_done)
    await stop_event.wait()

    logger.info("Shutting down...")

    await event_loop.stop()

    closed = await connection.close(timeout=5.0)
    if not closed:
        logger.warning("IRC close timed out, cancelling tasks...")

    irc_task.cancel()
    loop_task.cancel()
    await asyncio.gather(irc_task, loop_task, return_exceptions=True)

    if health_server is not None:
        await health_server.stop()

    logger.info("Shutdown complete")


def run() -> None:
    """Run the async main function."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    run()
