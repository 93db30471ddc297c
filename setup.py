from setuptools import setup, find_packages

setup(
    name="lhocv-classifier",
    version="0.1",
    description="Random forest classification of tabular data with leave-half-out cross-validation and per-class ROC/AUC.",
    packages=find_packages(exclude=["tests", "tests.*", "datasets"]),
    install_requires=[
        "pandas>=1.5",
        "numpy>=1.24",
        "scikit-learn>=1.2",
        "joblib>=1.2",
        "pyyaml>=6.0",
        "boto3>=1.28",
        "matplotlib>=3.7",
        "seaborn>=0.12",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "lhocv=lhocv.cli:main",
        ],
    },
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
