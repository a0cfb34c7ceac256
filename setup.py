#!/usr/bin/env python

# This file is part of trackgate.
# Copyright 2026, The trackgate developers.
#
# Permission is hereby granted, free of charge, to any person obtaining
# a copy of this software and associated documentation files (the
# "Software"), to deal in the Software without restriction, including
# without limitation the rights to use, copy, modify, merge, publish,
# distribute, sublicense, and/or sell copies of the Software, and to
# permit persons to whom the Software is furnished to do so, subject to
# the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.


import os

from setuptools import setup


def _read(fn):
    path = os.path.join(os.path.dirname(__file__), fn)
    with open(path) as f:
        return f.read()


setup(
    name="trackgate",
    version="1.0.0",
    description="quality gate and release classifier for MP3 submissions",
    author="The trackgate developers",
    license="MIT",
    platforms="ALL",
    long_description=_read("README.rst"),
    zip_safe=False,
    packages=[
        "trackgate",
        "trackgate.analysis",
        "trackgate.test",
        "trackgate.ui",
        "trackgate.util",
    ],
    package_data={"trackgate": ["config_default.yaml"]},
    entry_points={
        "console_scripts": [
            "trackgate = trackgate.ui:main",
        ],
    },
    python_requires=">=3.10",
    install_requires=[
        "confuse>=1.5.0",
        "mutagen>=1.45",
        "pyyaml",
        "typing_extensions",
    ]
    + (
        # Support for ANSI console colors on Windows.
        ["colorama"]
        if (os.name == "nt")
        else []
    ),
    extras_require={
        "test": [
            "pytest",
            "pytest-cov",
        ],
        "lint": [
            "flake8",
            "flake8-docstrings",
            "pep8-naming",
        ],
        "mypy": [
            "mypy",
            "types-PyYAML",
        ],
    },
    classifiers=[
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Multimedia :: Sound/Audio :: Analysis",
        "License :: OSI Approved :: MIT License",
        "Environment :: Console",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
)
