import logging

import polars as pl
import pytest

from datastreams.schema import Schema
from datastreams.table import Table


@pytest.fixture
def ab_schema() -> Schema:
    return Schema(['a', 'b'], [pl.Int64, pl.String], 2)


@pytest.fixture
def ab_table() -> Table:
    return Table.from_array([[1, 'x'], [2, 'y']], header=['a', 'b'])


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def package_logger():
    logger = logging.getLogger('datastreams')
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
