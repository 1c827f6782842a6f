#!/usr/bin/env python

from setuptools import setup, find_packages


setup(
    name="unfold",
    version="0.1.0",
    description="Inlining of quoted functions into expression trees",
    long_description=open("README.rst").read(),
    long_description_content_type="text/x-rst",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "astunparse>=1.6.3; python_version < '3.9'",
        "typing_extensions>=4.0",
        ],
    extras_require={
        "test": [
            "pytest",
            ],
        },
    platforms=["any"],
    keywords="AST expression tree inlining",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Operating System :: OS Independent",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Software Development :: Code Generators",
    ],
)
