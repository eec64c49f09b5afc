#!/usr/bin/env python3
"""
Setup script for the locale-workflow package

Locale topology, draft pairing, correlation identity, slug prefixes,
join discovery and the commit ledger for multi-locale content stores.
"""

from setuptools import setup, find_packages

setup(
    name="locale-workflow",
    version="0.1.0",
    packages=find_packages(include=["locale_workflow", "locale_workflow.*"]),
    python_requires=">=3.10",
    install_requires=[
        # 🚀 Web Framework
        "fastapi>=0.104.1",

        # 📋 Data Validation & Settings
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-dotenv>=1.0.0",

        # 🗄️ Database & Caching
        "redis[hiredis]>=5.0.1",
        "asyncpg>=0.29.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.21",
            "httpx>=0.25.2",
        ],
    },
    package_data={
        "locale_workflow": ["py.typed"],
    },
)
