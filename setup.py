from setuptools import setup, find_packages

setup(
    name="batch-builder",
    version="0.1.0",
    description="Assemble prepared SQL/CQL statements into one batch with aligned arguments",
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        'postgresql': [
            'psycopg2-binary==2.9.10',
        ],
        'test': [
            'pytest',
            'psycopg2-binary==2.9.10',
        ],
    },
)
