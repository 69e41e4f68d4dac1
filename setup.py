"""Setup configuration for the Buckingham Vault filter engine."""

from setuptools import setup, find_packages

setup(
    name="vault-filters",
    version="1.0.0",
    description="Filter state, URL sync and presets for the Buckingham Vault portal modules",
    author="Buckingham Vault",
    author_email="",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "pandas>=2.1.0",
        "pydantic>=2.5.0",
        "streamlit>=1.32.0",
        "openpyxl>=3.1.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=8.0.0",
            "pytest-cov>=4.1.0",
            "black>=24.1.0",
            "ruff>=0.2.0",
        ],
    },
)
