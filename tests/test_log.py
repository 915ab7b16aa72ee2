import logging

import pytest
from rich.logging import RichHandler

from kube_builder.log import ROOT_LOGGER, configure_logging, get_logger
from kube_builder.settings import AppSettings


@pytest.fixture(autouse=True)
def restore_package_logger():
    yield
    configure_logging(AppSettings())


def test_silent_by_default():
    root = configure_logging(AppSettings())

    assert root.name == ROOT_LOGGER
    assert [type(h) for h in root.handlers] == [logging.NullHandler]
    assert root.propagate is True


def test_rich_output_is_opt_in():
    root = configure_logging(AppSettings(RICH_LOGGING=True, LOG_LEVEL="debug"))

    assert [type(h) for h in root.handlers] == [RichHandler]
    assert root.level == logging.DEBUG
    assert root.propagate is False


def test_reconfigure_does_not_stack_handlers():
    configure_logging(AppSettings(RICH_LOGGING=True))
    root = configure_logging(AppSettings(RICH_LOGGING=True))
    assert len(root.handlers) == 1


def test_get_logger_namespaces_children():
    assert get_logger("builder").name == f"{ROOT_LOGGER}.builder"
    assert get_logger(f"{ROOT_LOGGER}.codec").name == f"{ROOT_LOGGER}.codec"
