from setuptools import setup, find_namespace_packages

setup(
    name="movies_api",
    version="1.0.0",
    packages=find_namespace_packages(include=[
        "app", "app.*",
        "storage", "storage.*",
        "models", "models.*",
        "ingestion", "ingestion.*",
    ]),
    install_requires=[
        "pytest",
        "regex",
        "uvicorn",
        "fastapi",
        "pydantic>=2",
        "sqlalchemy>=2.0",
        "httpx>=0.27.0",
    ],
    extras_require={
        "postgres": ["psycopg[binary]>=3.1"],
    },
    python_requires='>=3.11',
)
