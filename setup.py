"""
TaskStore setup.py — Package configuration and CLI entry point.
"""

from setuptools import find_packages, setup

setup(
    name="taskstore",
    version="1.0.0",
    description="TaskStore — task-tracking data-access layer over PostgreSQL",
    packages=find_packages(include=["taskstore", "taskstore.*"]),
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "taskstore=taskstore.cli:main",
        ],
    },
    install_requires=[
        "sqlalchemy>=2.0",
        "psycopg2-binary>=2.9",
        "pydantic>=2.5",
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
)
