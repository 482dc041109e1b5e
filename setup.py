#!/usr/bin/env python3

from setuptools import find_packages, setup

# Dependencies for gnuscribe itself
install_deps = [
    "numpy>=1.21",
    "matplotlib>=3.5",      # Colormaps for palettes, color parsing
    "ruamel.yaml>=0.17",
    "yayaml>=0.1",          # YAML loading and dumping on top of ruamel.yaml
]

# Dependencies for the tests
test_deps = ["pytest>=6.0", "pytest-cov>=2.5.1"]

# .............................................................................

DESCRIPTION = "Fluent builder for gnuplot scripts and data files"
LONG_DESCRIPTION = """
With gnuscribe, numeric data and plot settings are assembled into a gnuplot
script and a multi-block data file, which are then passed to gnuplot to show
the figure in a window or save it to a file. Data is passed as numpy arrays or
any other sequences; settings and per-curve styles are set via chainable
methods.

Requires gnuplot to be installed and available on the PATH.
"""


# .............................................................................

# A function to extract version number from __init__.py
def find_version(*file_paths) -> str:
    """Tries to extract a version from the given path sequence"""
    import codecs
    import os
    import re

    def read(*parts):
        """Reads a file from the given path sequence, relative to this file"""
        here = os.path.abspath(os.path.dirname(__file__))
        with codecs.open(os.path.join(here, *parts), "r") as fp:
            return fp.read()

    # Read the file and match the __version__ string
    file = read(*file_paths)
    match = re.search(r"^__version__\s?=\s?['\"]([^'\"]*)['\"]", file, re.M)
    if match:
        return match.group(1)
    raise RuntimeError("Unable to find version string in " + str(file_paths))


# .............................................................................

setup(
    name="gnuscribe",
    #
    # Set the version from gnuscribe.__version__
    version=find_version("gnuscribe", "__init__.py"),
    #
    # Project info
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    #
    author="gnuscribe developers",
    license="MIT",
    classifiers=[
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Visualization",
        "License :: OSI Approved :: MIT License",
    ],
    #
    # Distribution details, dependencies, ...
    packages=find_packages(exclude=["tests.*", "tests"]),
    package_data={"gnuscribe": ["cfg/*.yml"]},
    python_requires=">=3.8",
    install_requires=install_deps,
    extras_require=dict(test=test_deps, test_deps=test_deps),
)
