from setuptools import setup, find_packages
from trieve_cli.consts import package_name, package_version

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name=package_name,
    version=package_version,
    author="Trieve",
    description="Command-line client for the Trieve search platform",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/devflowinc/trieve",
    packages=find_packages(include=["trieve_cli", "trieve_cli.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
    install_requires=[
        "filelock>=3.12",
        "httpx>=0.25",
        "pydantic>=2.0",
        "python-dotenv>=0.19.0",
        "questionary>=2.0",
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "trieve=trieve_cli.cli.main:main",
        ],
    },
)
