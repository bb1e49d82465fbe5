# setup.py
from setuptools import setup, find_packages

setup(
    name="stand_db",
    version="0.1.0",
    description="CRUD, pagination, session and security helpers over SQLite and Postgres",
    author="Swift Fox",
    packages=find_packages(
        exclude=(
            "tests",
            "tests.*",
            "docs",
            "build",
            "dist",
        )
    ),
    install_requires=[
        "bcrypt>=4.0",
        "psycopg2-binary>=2.9",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.10",
)
