#!/usr/bin/env python
"""Installation script for remopt."""
import os

from setuptools import setup

repo_root = os.path.dirname(os.path.abspath(__file__))

with open(os.path.join(repo_root, "tests", "requirements.txt"), encoding="utf8") as f:
    tests_require = [line.strip() for line in f if line.strip()]

packages = [  # Packages must be sorted alphabetically to ease maintenance and merges.
    "remopt",
    "remopt.client",
    "remopt.core",
    "remopt.core.cli",
    "remopt.core.io",
    "remopt.core.utils",
    "remopt.core.worker",
    "remopt.service",
    "remopt.service.client",
    "remopt.storage",
    "remopt.testing",
]

extras_require = {
    "test": tests_require,
}

setup_args = dict(
    name="remopt",
    version="0.1.0",
    description="Client for remote hyperparameter tuning services",
    long_description=open(
        os.path.join(repo_root, "README.rst"), encoding="utf8"
    ).read(),
    license="BSD-3-Clause",
    author="remopt developers",
    packages=packages,
    package_dir={"": "src"},
    include_package_data=True,
    python_requires=">=3.7",
    entry_points={
        "console_scripts": [
            "remopt = remopt.core.cli:main",
        ],
    },
    install_requires=[
        "PyYAML",
        "numpy",
        "tabulate",
        "AppDirs",
        "requests",
    ],
    tests_require=tests_require,
    extras_require=extras_require,
    zip_safe=False,
)

setup_args["keywords"] = [
    "Machine Learning",
    "Hyperparameter Tuning",
    "Optimization",
    "REST client",
]

setup_args["platforms"] = ["Linux"]

setup_args["classifiers"] = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "License :: OSI Approved :: BSD License",
    "Operating System :: POSIX",
    "Operating System :: Unix",
    "Programming Language :: Python",
    "Topic :: Scientific/Engineering",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
] + [("Programming Language :: Python :: %s" % x) for x in "3 3.8 3.9".split()]

if __name__ == "__main__":
    setup(**setup_args)
