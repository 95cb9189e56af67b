from setuptools import find_packages, setup


setup(
    name="preproc",
    version="0.1.0",
    description="Include-directive preprocessor: dependency tree + single-file build",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "preproc=preproc.cli:main",
        ],
    },
)
