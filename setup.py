from setuptools import setup, find_packages

setup(
    name="ckms-quantile",
    version="0.1.0",
    description="Targeted streaming quantiles (CKMS biased quantile summary) with bounded memory",
    author="adamfilli",
    packages=find_packages(include=["ckmsquantile", "ckmsquantile.*"]),
    install_requires=[
        "matplotlib",
        "pandas",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    include_package_data=True,
    python_requires=">=3.13",
)
