#!/usr/bin/env python
"""Setup shim for tools that cannot build from pyproject.toml directly.

Package metadata and dependencies live in pyproject.toml.
"""

from setuptools import setup

if __name__ == "__main__":
    setup()
