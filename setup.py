#!/usr/bin/env python3
"""
Setup script for kukuchat
"""

from setuptools import setup, find_packages

setup(
    name="kukuchat",
    version="0.0.1",
    description="Asynchronous client for the kuku.lu anonymous chat rooms",
    packages=find_packages(include=["client", "client.*", "shared", "shared.*"]),
    install_requires=[
        "httpx==0.28.1",
        "typer==0.12.3",
        "click==8.1.7",
        "rich==13.9.2",
        "aioconsole==0.8.1",
    ],
    extras_require={
        "test": [
            "pytest==8.4.2",
            "pytest-asyncio==1.2.0",
        ],
    },
    python_requires=">=3.8",
    entry_points={
        'console_scripts': [
            'kukuchat=client.cli:main',
        ],
    },
)
