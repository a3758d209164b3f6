#!/usr/bin/env python3

from setuptools import find_packages, setup

version = {}
with open("./pacmeta/_version.py") as f:
    exec(f.read(), version)

with open("./README.md") as f:
    long_description = f.read()

setup(
    name="pacmeta",
    version=version["__version__"],
    license="Apache-2.0",
    description="Recipe metadata and version constraint checks for pacman-based distributions",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["test", "test.*"]),
    platforms="any",
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
            "pytest-cov",
            "pretend",
            "hypothesis",
        ],
        "dev": [
            "flake8",
            "black",
            "isort",
            "pytest",
            "pytest-cov",
            "pretend",
            "hypothesis",
            "coverage[toml]",
            "interrogate",
            "mypy",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Intended Audience :: Developers",
        "Topic :: System :: Software Distribution",
    ],
)
