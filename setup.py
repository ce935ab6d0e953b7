from setuptools import setup
from pathlib import Path

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="humantyper",
    version="1.0.0",
    description="Type text into the focused window at a human-like pace",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=["humantyper", "humantyper.keyboard"],
    install_requires=[
        "zendriver",
        "Pillow",
        "pynput",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["humantyper = humantyper.__main__:main"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
)
