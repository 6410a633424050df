import setuptools
from setuptools import find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()


def read_requirements(path):
    if not isinstance(path, list):
        path = [path]
    requirements = []
    for p in path:
        with open(p) as fh:
            requirements.extend(
                [line.strip() for line in fh if line.strip() and not line.startswith("#")]
            )
    return requirements


setuptools.setup(
    name="rest-sdk",
    version="0.1.0",
    description="Request builder for HTTP APIs: typed parameters, XML/JSON bodies, file uploads and URL templates.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(
        where=".",
        exclude=(
            "requirements",
            "tests",
            "tests.*",
        ),
    ),
    install_requires=read_requirements("requirements/requirements.sdk.http.txt"),
    extras_require={
        "test": read_requirements("requirements/requirements.test.unit.txt"),
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
)
