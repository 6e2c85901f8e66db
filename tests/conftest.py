"""Pytest fixtures for family layout tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from models import Person


def make_person(pid: str, parents=(), spouses=(), **kwargs) -> Person:
    return Person(id=pid, first_name=pid, parent_ids=tuple(parents), spouse_ids=tuple(spouses), **kwargs)


@pytest.fixture
def person():
    """Factory for Person records."""
    return make_person


@pytest.fixture
def diamond():
    """A with children B and C, who are both parents of D."""
    return [
        make_person("A"),
        make_person("B", parents=["A"]),
        make_person("C", parents=["A"]),
        make_person("D", parents=["B", "C"]),
    ]


@pytest.fixture
def extended_family():
    """Three generations with a remarriage, a married-in spouse and an unrelated line."""
    return [
        make_person("grandpa", spouses=["grandma"], gender="M", birth_date="1920-05-01"),
        make_person("grandma", spouses=["grandpa"], gender="F", birth_date="1922-03-14"),
        make_person("dad", parents=["grandpa", "grandma"], spouses=["mom", "stepmom"], gender="M"),
        make_person("aunt", parents=["grandpa", "grandma"], gender="F"),
        make_person("mom", spouses=["dad"], gender="F"),
        make_person("stepmom", gender="F"),
        make_person("kid1", parents=["dad", "mom"]),
        make_person("kid2", parents=["mom", "dad"]),
        make_person("halfkid", parents=["dad", "stepmom"]),
        make_person("cousin", parents=["aunt"]),
        make_person("stranger"),
        make_person("stranger_child", parents=["stranger"]),
    ]
