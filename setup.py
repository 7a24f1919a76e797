from setuptools import setup, find_namespace_packages

setup(
    name="scrumcmd",
    version="1.0.0",
    packages=find_namespace_packages(include=["scrumcmd*", "scrum_common*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "python-jose[cryptography]",
        "sqlalchemy[asyncio]>=2.0",
        "aiosqlite",
        "asyncpg",
        "pydantic>=2",
        "alembic",
        "reportlab",
        "anthropic",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
)
