from setuptools import find_packages, setup

setup(
    name="pstretch",
    version="0.1.0",
    description="Extreme time stretching of audio (paulstretch) from the command line.",
    packages=find_packages(include=["pstretch", "pstretch.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "scipy",
        "soundfile",
        "click",
        "rich",
        "pydantic>=2",
        "toml",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "pstretch=pstretch.cli.main:cli",
        ],
    },
)
