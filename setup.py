#!/usr/bin/env python3
"""
Setup configuration for Disk Status - S.M.A.R.T. disk health reporter
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="disk-status",
    version="1.0.0",
    author="Magnus Modig",
    author_email="kontakt@modigs-datahjelp.no",
    description="S.M.A.R.T. disk health reporter for Linux - leveled, colorized log output per disk",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(),
    py_modules=[
        "config_manager",
        "decision_engine",
        "device_scanner",
        "disk_logger",
        "report_parser",
        "smart_monitor",
    ],
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: POSIX :: Linux",
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "Topic :: System :: Monitoring",
    ],
    python_requires=">=3.8",
    install_requires=[
        "pySMART>=1.2.0",
        "rich>=12.0.0",
    ],
    extras_require={
        "dev": ["pytest>=6.0", "pytest-cov>=2.10"],
    },
    entry_points={
        "console_scripts": [
            "disk-status=smart_monitor:main",
        ],
    },
    keywords="smart monitoring disk health s.m.a.r.t smartctl linux hdd",
    zip_safe=False,
    platforms=["Linux"],
)
