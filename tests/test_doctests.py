from __future__ import annotations

import doctest
import importlib

import pytest


@pytest.mark.parametrize(
    "module_name",
    ["heliacal", "heliacal.core.angles", "heliacal.engine.conjunction"],
)
def test_module_examples(module_name: str) -> None:
    module = importlib.import_module(module_name)

    failures, tried = doctest.testmod(module, optionflags=doctest.ELLIPSIS)

    assert tried > 0
    assert failures == 0
