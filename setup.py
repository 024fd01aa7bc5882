# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="icedtea",
    version="0.4.0",
    description="Compiler and watcher for files with embedded IcedTea fragments",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["icedtea", "icedtea.*"]),
    python_requires=">=3.9",
    install_requires=[
        "watchdog",  # Observer backend for the watch command
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'icedtea=icedtea.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
