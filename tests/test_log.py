from __future__ import annotations

import json
import logging

import pytest

from visual_regression import configure_logging


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("visual_regression")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_json_logging(restore_logger, capsys) -> None:
    configure_logging("info")

    logging.getLogger("visual_regression.compare").info("Diferença medida", extra={"diff_pixels": 3})

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "Diferença medida"
    assert record["levelname"] == "INFO"
    assert record["diff_pixels"] == 3


def test_plain_logging(restore_logger, capsys) -> None:
    configure_logging("DEBUG", json_output=False)

    logging.getLogger("visual_regression.imaging").debug("detalhe")

    assert "detalhe" in capsys.readouterr().out


def test_invalid_level_rejected(restore_logger) -> None:
    with pytest.raises(ValueError):
        configure_logging("verbose")
