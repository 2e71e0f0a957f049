#!/usr/bin/env python3
"""
Setup script for the deptquery package.
"""

import re

from setuptools import setup, find_packages

# Read metadata from package without importing it
with open("deptquery/__init__.py") as f:
    metadata = dict(re.findall(r'^__(\w+)__ = "([^"]*)"', f.read(), re.MULTILINE))

# Read requirements
with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="deptquery",
    version=metadata["version"],
    author=metadata["author"],
    description="Pooled PostgreSQL department lookup service with batched row-count deletes",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["deptquery", "deptquery.*"]),
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7"],
    },
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "deptquery=deptquery.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database :: Front-Ends",
        "Framework :: AsyncIO",
    ],
    keywords="postgresql psycopg connection pool aiohttp example",
)
