from setuptools import setup, find_packages

setup(
    name="cmdseam",
    version="0.1.0",
    description="cmdseam - command registry served over a line protocol and JSON-RPC 2.0",
    author="cmdseam Team",
    packages=find_packages(include=["cmdseam", "cmdseam.*"]),
    install_requires=[
        "pyzmq>=24.0.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
    },
    python_requires=">=3.9",
)
