from setuptools import setup, find_packages

setup(
    name="connect4sync",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["run"],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "filelock",  # Locks the shared settings file
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "connect4sync=connect4sync.interfaces.cli:main",
        ],
    },
)
