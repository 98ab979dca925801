"""Tests for the logging setup module."""

import logging
import sys

from linen_ocr.utils.logger import get_logger, setup_logging


class TestSetupLogging:
    """Tests for the setup_logging function."""

    def test_setup_creates_handler(self) -> None:
        root = logging.getLogger()
        original_handlers = root.handlers[:]
        original_level = root.level
        root.handlers.clear()
        try:
            setup_logging("DEBUG")
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0], logging.StreamHandler)
            assert root.handlers[0].stream is sys.stdout
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = original_handlers
            root.setLevel(original_level)

    def test_setup_idempotent(self) -> None:
        root = logging.getLogger()
        original_handlers = root.handlers[:]
        original_level = root.level
        root.handlers.clear()
        try:
            setup_logging("INFO")
            count = len(root.handlers)
            setup_logging("INFO")
            assert len(root.handlers) == count
        finally:
            root.handlers[:] = original_handlers
            root.setLevel(original_level)

    def test_setup_invalid_level_defaults_to_info(self) -> None:
        root = logging.getLogger()
        original_handlers = root.handlers[:]
        original_level = root.level
        root.handlers.clear()
        try:
            setup_logging("NONEXISTENT")
            assert root.level == logging.INFO
        finally:
            root.handlers[:] = original_handlers
            root.setLevel(original_level)

    def test_lowercase_level(self) -> None:
        root = logging.getLogger()
        original_handlers = root.handlers[:]
        original_level = root.level
        root.handlers.clear()
        try:
            setup_logging("warning")
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = original_handlers
            root.setLevel(original_level)

    def test_existing_handlers_left_alone(self) -> None:
        root = logging.getLogger()
        original_handlers = root.handlers[:]
        original_level = root.level
        root.handlers.clear()
        sentinel = logging.NullHandler()
        root.addHandler(sentinel)
        try:
            setup_logging("DEBUG")
            assert root.handlers == [sentinel]
        finally:
            root.handlers[:] = original_handlers
            root.setLevel(original_level)


class TestGetLogger:
    """Tests for the get_logger function."""

    def test_returns_named_logger(self) -> None:
        logger = get_logger("linen_ocr.test")
        assert logger.name == "linen_ocr.test"
        assert isinstance(logger, logging.Logger)

    def test_same_name_returns_same_logger(self) -> None:
        assert get_logger("linen_ocr.same") is get_logger("linen_ocr.same")
