"""
Setup script for pocketlearn.

pocketlearn is the data-access core of a course/lesson learning client
backed by a PocketBase record store. It provides:

1. Session Manager - one lazily authenticated service session
2. Collection Client - complete, capped reads of collections and records
3. Catalog - typed courses/lessons, search, language filter, lesson order

The 'pocketlearn' command is a terminal front end over the same core.
"""

from setuptools import find_packages, setup

setup(
    name="pocketlearn",
    version="1.0.0",
    description="Course and lesson data-access core for a PocketBase-backed learning client",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["pocketlearn", "pocketlearn.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        "PyJWT>=2.4.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pocketlearn=pocketlearn.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
    ],
    keywords="learning courses lessons pocketbase client",
)
