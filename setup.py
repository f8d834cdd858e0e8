"""Setup configuration for Epi Analytics package."""

from setuptools import setup, find_packages

setup(
    name="epi-analytics",
    version="1.0.0",
    description="Weekly notifiable-disease surveillance analytics on DuckDB",
    author="",
    author_email="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "duckdb>=1.0.0",
        "pandas>=2.1.0",
        "numpy>=1.26.0",
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-dotenv>=1.0.0",
        "tqdm>=4.66.0",
    ],
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.26.0",
            "black>=24.1.0",
            "ruff>=0.2.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "epi-load=scripts.load_data:main",
        ],
    },
)
