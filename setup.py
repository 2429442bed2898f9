# setup.py
from setuptools import setup, find_packages

setup(
    name="wat",
    version="0.1.0",
    description="A small, strongly typed, purely functional Lisp",
    packages=find_packages(include=["wat", "wat.*"]),
    python_requires=">=3.10",
    extras_require={
        "tests": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
