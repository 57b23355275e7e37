# setup.py
from setuptools import setup, find_packages

setup(
    name="robot_exclusion",
    version="0.1.0",
    description="robots.txt parser and cached, fail-open robot exclusion service",
    packages=find_packages(include=["robot_exclusion", "robot_exclusion.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
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
        "console_scripts": ["robot-exclusion=robot_exclusion.cli:cli"],
    },
    python_requires=">=3.11",
)
