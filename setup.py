#!/usr/bin/env python3
"""JenkinsMaster CLI - Setup"""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="jenkinsmaster",
    version="1.0.0",
    description="Deploy a Jenkins controller to Hetzner Cloud or an existing VM",
    author="JenkinsMaster Team",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={
        "jenkinsmaster": ["templates/ansible/*.j2"],
    },
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "jenkinsmaster=jenkinsmaster.main:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
