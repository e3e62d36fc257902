#!/usr/bin/env python3
"""
Setup configuration for spotify-private-api
Manage Spotify playlist folders through the web player's private API
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "requests>=2.31.0",
    "pyyaml>=6.0.1",
    "python-dotenv>=1.0.0",
    "click>=8.1.7",
    "rich-click>=1.7.0",
]

setup(
    name="spotify-private-api",
    version="0.1.0",
    author="spotify-private-api contributors",
    description="Create, move and remove Spotify playlist folders via the web player API",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["spotify_private_api", "spotify_private_api.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Internet :: WWW/HTTP",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "spfolders=spotify_private_api.cli:main",
        ],
    },
    keywords="spotify playlist folders private api cli",
)
