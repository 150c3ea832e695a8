import pytest

from routing.geo import Coordinate

from fakes import TimerFactory


@pytest.fixture
def lapua():
    return Coordinate(lat=62.9693, lon=23.0068)


@pytest.fixture
def seinajoki():
    return Coordinate(lat=62.7877, lon=22.8549)


@pytest.fixture
def timer_factory():
    return TimerFactory()
