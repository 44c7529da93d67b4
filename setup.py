from setuptools import setup, find_packages


setup(
    name='bootstrap_amm',
    version='0.1',
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={
        "bootstrap_amm.config": ["defaults.yaml"],
    },
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
        "flask>=2.3.0",
        "flask-openapi3>=3.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
)
