"""Shared test fixtures."""

import pytest
import structlog
import tempfile
from pathlib import Path


KETTLE_ACTIVITY = """
// {type:activity}
// {generate:true}

(start)-><a>[kettle empty]->(Fill Kettle)->|b|
<a>[kettle full]->|b|->(Boil Kettle)->|c|
|b|->(Add Tea Bag)->(Add Milk)->|c|->(Pour Water)
(Pour Water)->(end)
"""

SHOP_CLASSES = """
// {type:class}
// {direction:topDown}
// {generate:true}

[note: You can stick notes on diagrams too!{bg:cornsilk}]
[Customer]<>1-orders 0..*>[Order]
[Order]++*-*>[LineItem]
[Order]-1>[DeliveryMethod]
[Order]*-*>[Product|EAN_Code|promo_price()]
[Category]<->[Product]
[DeliveryMethod]^[National]
[DeliveryMethod]^[International]
"""


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configured by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def temp_dir():
    """Temporary directory for tests."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def kettle_text():
    """Activity diagram with decisions and parallel bars."""
    return KETTLE_ACTIVITY


@pytest.fixture
def class_text():
    """Class diagram with a note, associations, a record and inheritance."""
    return SHOP_CLASSES


@pytest.fixture
def write_source(temp_dir):
    """Write yUML text to a file in the temp dir and return its path."""

    def _write(text: str, name: str = "diagram.yuml") -> Path:
        path = temp_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
