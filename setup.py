from setuptools import setup, find_packages

setup(
    name="cower",
    version="0.1.0",
    description="cower - a simple AUR agent",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.12",
    install_requires=[
        "click>=8.1.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "cower=cower.main:main",
        ],
    },
)
