import textwrap
from pathlib import Path

import pytest

from aggdef.compiler.compiler import AggregateCompiler
from aggdef.compiler.config import config
from aggdef.compiler.inventory import INVENTORY
from aggdef.parser.aggregate_parser import AggregateParser

TEST_DATA = Path(__file__).resolve().parent.parent / "test_data"


def declaration(body: str, target: str = "MySum", header: str = "") -> str:
    """Wrap item lines in an aggregate declaration."""
    return f"{header}\naggregate {target} {{\n{textwrap.dedent(body)}\n}}\n"


@pytest.fixture(scope="session")
def parser():
    return AggregateParser()


@pytest.fixture
def compiler():
    return AggregateCompiler()


@pytest.fixture
def compile_text(parser, compiler):
    def _compile(text):
        return compiler.compile(parser.parse_one(text))
    return _compile


@pytest.fixture
def sample_file():
    return TEST_DATA / "aggregates.agg"


@pytest.fixture(autouse=True)
def reset_global_state():
    yield
    config.reset()
    INVENTORY.clear()
