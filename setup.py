from setuptools import setup, find_packages

setup(
    name="socialpod",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*", "alembic"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt<5",  # passlib backend self-test breaks on bcrypt 5
        "python-multipart",
        "pydantic[email]",
        "pydantic-settings",
        "python-dotenv",
        "alembic",
        "Pillow",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
