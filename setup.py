"""
Setup script for FlexiPDF.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="flexipdf",
    version="0.1.0",
    description="PDF parsing, merging, splitting, stamping, compression, encryption and conversion toolkit",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="FlexiPDF Contributors",
    author_email="",
    package_dir={"": "packages"},
    packages=find_packages(where="packages", include=["flexipdf", "flexipdf.*"]),
    install_requires=[
        "pypdf>=4.0.0",
        "python-docx>=1.1.0",
        "Pillow>=10.0.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "flexipdf=flexipdf.cli.main:run",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Office/Business",
        "Topic :: Utilities",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf merge split rotate crop watermark compress encrypt convert",
    include_package_data=True,
    zip_safe=False,
)
