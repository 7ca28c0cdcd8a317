from setuptools import setup, find_packages

setup(
    name="ig-relay",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi>=0.104.1",
        "uvicorn>=0.24.0",
        "gunicorn>=21.2.0",
        "python-dotenv>=1.0.0",
        "httpx>=0.25.1",
        "pydantic>=2.4.2",
        "typing-extensions>=4.7.1",
        "structlog>=23.2.0",
        "pydantic-settings>=2.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    python_requires=">=3.11",
)
