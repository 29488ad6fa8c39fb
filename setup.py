# setup.py
from setuptools import setup, find_packages

setup(
    name="linkgrep",
    version="0.1.0",
    description="Search the pages linked from a text document for a term",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"linkgrep": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
        "Jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["linkgrep=linkgrep.cli:cli"],
    },
    python_requires=">=3.11",
)
