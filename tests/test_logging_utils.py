import logging

import numpy as np

from autocanvas.geometry import Point2D, Size2D
from autocanvas.logging_utils import apply_debug_logging, summarize
from autocanvas.model import ItemNode


def test_summarize_compacts_arrays_and_nodes():
    big = np.arange(20, dtype=float).reshape(4, 5)

    assert summarize(big) == "ndarray(shape=(4, 5), min=0, max=19)"
    assert summarize(np.array([1.0, 2.0])) == "ndarray([1.0, 2.0])"
    assert summarize(ItemNode("n1", Point2D(0, 0), Size2D(1, 1), "a.md")) == "<item n1>"
    assert summarize(list(range(10))).endswith("... (10 items)]")


def _double(value):
    return value * 2


def test_apply_debug_logging_traces_calls(caplog):
    logger = logging.getLogger("autocanvas.tests.trace")
    namespace = {"__name__": _double.__module__, "double": _double}

    apply_debug_logging(namespace, logger=logger)
    traced = namespace["double"]

    with caplog.at_level(logging.DEBUG, logger="autocanvas.tests.trace"):
        assert traced(21) == 42

    messages = [record.getMessage() for record in caplog.records]
    assert "-> double(21)" in messages
    assert "<- double = 42" in messages


def test_apply_debug_logging_is_silent_above_debug(caplog):
    logger = logging.getLogger("autocanvas.tests.quiet")
    namespace = {"__name__": _double.__module__, "double": _double}
    apply_debug_logging(namespace, logger=logger)

    with caplog.at_level(logging.INFO, logger="autocanvas.tests.quiet"):
        assert namespace["double"](2) == 4

    assert caplog.records == []
