"""Setup script for the Org cross-reference label checker."""

from setuptools import setup, find_packages

setup(
    name="labelref",
    version="0.1.0",
    description="Label indexing, reference validation and type inference for Org documents",
    author="labelref developers",
    python_requires=">=3.9",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pyyaml>=6.0",
        "tqdm>=4.66.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0", "black>=23.0.0", "isort>=5.12.0"],
    },
    entry_points={
        "console_scripts": [
            "check-references=labelref.cli:main",
        ],
    },
)
