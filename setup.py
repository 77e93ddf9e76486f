#!/usr/bin/env python

import os

from setuptools import find_namespace_packages, setup

AWSAUTH_SRC_DIR = os.path.join("src", "awsauth")

VERSION = (1, 0, 0, None)  # Default
with open(os.path.join(AWSAUTH_SRC_DIR, "version.py"), encoding="utf-8") as f:
    exec(f.read())
version = ".".join([str(v) for v in VERSION if v is not None])

setup(
    name="awsauth",
    version=version,
    description="AWS credential resolution and Signature Version 2/4 request signing",
    long_description="Resolves AWS credentials from the environment, the shared "
    "credentials file or EC2 instance metadata, and signs outbound API requests.",
    license="Apache-2.0",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["awsauth", "awsauth.*"]),
    install_requires=[
        "requests<3.0.0",
    ],
    extras_require={
        "development": [
            "botocore",
            "pytest",
            "pytest-cov",
        ],
    },
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Security",
    ],
)
