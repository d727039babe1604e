# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="logdispatch",
    version="0.1.0",
    description="Structured log dispatcher with console and rotating file transports",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["logdispatch*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'logdispatch=logdispatch.interface.cli.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
