"""Install the catalog admin service."""

from setuptools import setup, find_packages

setup(
    name='catalog-admin',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    python_requires='>=3.10',
    install_requires=[
        "fastapi",
        "starlette",
        "pydantic>=2",
        "sqlalchemy>=2",
        "pyjwt",
        "requests",
        "python-json-logger",
        "click",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        'console_scripts': ['catalog-admin=catalog_admin.cli:cli'],
    },
    zip_safe=False
)
