from setuptools import setup, find_packages

setup(
    name="source-mongodb-strict-encrypt-acceptance",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    package_data={
        "source_mongodb": ["spec.json"],
        "acceptance": ["resources/*.json"],
    },
    include_package_data=True,
    install_requires=[
        "pymongo>=4.0.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "pyyaml>=6.0",
        "structlog>=23.0.0",
        "python-dotenv>=1.0.0",
        "dnspython>=2.0.0",
    ],
    extras_require={
        "tests": [
            "pytest>=7.0.0",
            "mongomock>=4.1.0",
        ],
    },
    python_requires=">=3.8",
)
