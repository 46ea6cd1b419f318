from setuptools import find_packages, setup

setup(
    name="reverberance",
    version="0.1.0",
    description="Synthetic room reverberation for audio recordings: impulse response synthesis, convolution, tone shaping and stereo widening.",
    packages=find_packages(include=["reverberance", "reverberance.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "scipy",
        "librosa",
        "soundfile",
        "click",
        "tabulate",
        "pydantic>=2",
        "toml",
        "rich",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "reverberance=reverberance.cli:cli",
        ],
    },
)
