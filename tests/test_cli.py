import logging

from watersketch.__main__ import build_parser
from watersketch.logging_config import configure_logging


def test_parser_defaults(monkeypatch):
    monkeypatch.delenv("WATERSKETCH_DEBUG", raising=False)
    args = build_parser().parse_args([])
    assert args.debug is False
    assert args.serve is False
    assert args.seed is None
    assert args.port == 8000


def test_debug_flag_from_environment(monkeypatch):
    monkeypatch.setenv("WATERSKETCH_DEBUG", "true")
    assert build_parser().parse_args([]).debug is True


def test_serve_options():
    args = build_parser().parse_args(["--serve", "--host", "0.0.0.0", "--port", "9001", "--seed", "3"])
    assert args.serve and args.host == "0.0.0.0" and args.port == 9001 and args.seed == 3


def test_log_level_from_environment(monkeypatch):
    monkeypatch.setenv("WATERSKETCH_LOG_LEVEL", "debug")
    logger = configure_logging()
    assert logger.name == "watersketch"
    assert logger.level == logging.DEBUG


def test_explicit_log_level_wins(monkeypatch):
    monkeypatch.setenv("WATERSKETCH_LOG_LEVEL", "debug")
    assert configure_logging("warning").level == logging.WARNING
