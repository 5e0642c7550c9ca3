#!/usr/bin/env python3
"""
Redis Playground Setup Script
=============================
Allows installation of the redis-playground package.

Usage:
    pip install -e .           # Development install
    pip install -e .[test]     # Development install with test tools
    pip install .              # Regular install
"""

from setuptools import setup, find_packages

setup(
    name="redis-playground",
    version="1.1.0",
    packages=find_packages(include=["playground", "playground.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "redis-playground=playground.console:main",
        ],
    },
)
