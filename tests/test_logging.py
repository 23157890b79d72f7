"""Tests for loguru logging setup."""

import logging

from loguru import logger

from type_registry import TypeRegistry, setup_logging


def test_setup_logging_routes_stdlib_logging():
    """Messages from the standard logging module end up in loguru sinks."""
    setup_logging("INFO")
    messages: list[str] = []
    sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="INFO")
    try:
        logging.getLogger("some.library").warning("library warning")
    finally:
        logger.remove(sink_id)

    assert "library warning" in messages


def test_registry_logs_registration():
    setup_logging("DEBUG")
    messages: list[str] = []
    sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")

    class Logged:
        pass

    try:
        with TypeRegistry() as registry:
            registry.register(Logged)
    finally:
        logger.remove(sink_id)
        setup_logging("INFO")

    assert any(message.startswith("Registered Slot(") for message in messages)
    assert any(message.startswith("Cleared registry") for message in messages)
