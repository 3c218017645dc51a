# setup.py
from setuptools import setup, find_packages

setup(
    name="canon_scout",
    version="0.1.0",
    description="CanonScout: проверка канонических URL и их вариантов",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"canon_scout": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.2",
        "jinja2>=3.1",
        "markupsafe>=2.1",
        "multidict>=6.0",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "yarl>=1.9",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "canon-scout=canon_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
