#!/usr/bin/env python3
"""
Setup script for Laracasts Downloader
"""

from setuptools import setup, find_packages
import pathlib

# Read the README file
here = pathlib.Path(__file__).parent.resolve()
try:
    long_description = (here / 'README.md').read_text(encoding='utf-8')
except FileNotFoundError:
    long_description = "Download all Laracasts lessons and series episodes for offline viewing"

# Read version from __init__.py
version = {}
with open(here / 'laracasts_downloader' / '__init__.py') as f:
    exec(f.read(), version)

setup(
    name="laracasts-downloader",
    version=version['__version__'],
    description=version['__description__'],
    long_description=long_description,
    long_description_content_type="text/markdown",
    author=version['__author__'],
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "requests>=2.31.0",
        "rich>=13.0.0",
        "beautifulsoup4>=4.12.0",
        "lxml>=4.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "laracasts-downloader=laracasts_downloader.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Multimedia :: Video",
        "Topic :: Education",
    ],
    keywords="laracasts downloader education video course offline",
)
