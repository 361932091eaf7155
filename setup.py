"""
Setup script for learnflow-core.

learnflow-core is the decision core of the learnflow practice platform.
It serves three roles:

1. Answer Scoring - One verdict for every question modality
2. Spaced Repetition - SM-2 scheduling for missed questions
3. Adaptive Selection - Ranking a topic's pool for the next session

The 'learnflow' command exposes the same operations for content checks
and offline inspection.
"""

from setuptools import find_packages, setup

setup(
    name="learnflow-core",
    version="1.0.0",
    description="Answer scoring, spaced repetition and adaptive question selection",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="learnflow",
    packages=find_packages(include=["learnflow", "learnflow.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "learnflow=learnflow.cli.main:run",
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
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition scoring adaptive education",
)
