#!/usr/bin/env python3
import re
from pathlib import Path

from setuptools import setup, find_packages

HERE = Path(__file__).parent

INSTALL_REQUIRES = [
    "requests>=2.28.0",
    "urllib3>=1.26.0",
]

DEV_REQUIRES = [
    "pytest>=7.0.0",
    "pytest-cov>=4.0.0",
    "black>=23.0.0",
    "flake8>=6.0.0",
    "mypy>=1.0.0",
]


def read_version() -> str:
    constants = (HERE / "config" / "constants.py").read_text(encoding="utf-8")
    match = re.search(r'^__version__\s*=\s*["\']([^"\']+)["\']', constants, re.MULTILINE)
    return match.group(1) if match else "0.0.0"


setup(
    name="hdrscope",
    version=read_version(),
    description="HTTP security header analyzer with per-policy verdicts, highlighted headers and exclusion rules",
    long_description=(HERE / "README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["src", "src.*", "config", "config.*"]),
    py_modules=["hdrscope"],
    python_requires=">=3.9",
    install_requires=INSTALL_REQUIRES,
    extras_require={"dev": DEV_REQUIRES},
    entry_points={"console_scripts": ["hdrscope=hdrscope:main"]},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Information Technology",
        "Intended Audience :: System Administrators",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Security",
        "Topic :: Internet :: WWW/HTTP",
    ],
    keywords=["security", "http-headers", "csp", "hsts", "cors", "cookies"],
)
