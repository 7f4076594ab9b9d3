import logging

from musclelab.utils import logger as ml_logger


def test_stage_lines_and_debug_share_the_package_logger(caplog):
    ml_logger.logger.addHandler(caplog.handler)
    try:
        caplog.set_level(logging.DEBUG, logger=ml_logger.LOGGER_NAME)
        ml_logger.log("[INFO] PoseStage: Starting")
        ml_logger.debug("[JointController] torque clamp joint=left_knee")
    finally:
        ml_logger.logger.removeHandler(caplog.handler)

    assert [(r.name, r.levelno, r.getMessage()) for r in caplog.records] == [
        ("musclelab", logging.INFO, "[INFO] PoseStage: Starting"),
        ("musclelab", logging.DEBUG, "[JointController] torque clamp joint=left_knee"),
    ]


def test_logger_does_not_propagate():
    assert ml_logger.logger.propagate is False
    assert len(ml_logger.logger.handlers) == 1
