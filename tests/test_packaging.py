"""Tests for the packaging metadata."""

import os
import re


ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _pyproject() -> str:
    with open(os.path.join(ROOT, "pyproject.toml"), encoding="utf-8") as fh:
        return fh.read()


class TestPyproject:
    """pyproject.toml only points at files that belong in the package."""

    def test_declared_packages_exist(self):
        match = re.search(r'^packages = \[(.*)\]$', _pyproject(), re.MULTILINE)
        assert match is not None

        for name in re.findall(r'"([^"]+)"', match.group(1)):
            assert os.path.isfile(os.path.join(ROOT, name, "__init__.py"))

    def test_readme_if_declared_is_not_a_design_document(self):
        match = re.search(r'^readme = "([^"]+)"$', _pyproject(), re.MULTILINE)
        if match is None:
            return

        assert match.group(1).lower().startswith("readme")
        assert os.path.isfile(os.path.join(ROOT, match.group(1)))
