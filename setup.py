from setuptools import setup, find_namespace_packages

setup(
    name="leaguestandings",
    version="0.1",
    packages=find_namespace_packages(include=["leaguestandings", "leaguestandings.*"]),
    package_data={"leaguestandings.config": ["*.json"]},
    install_requires=[
        "pandas>=2.0.0",
        "requests>=2.31.0",
        "pyuca>=1.2"
    ],
    extras_require={
        "test": ["pytest>=7.0"]
    },
    python_requires=">=3.9.12",
    description="Singles and doubles league standings built from Airtable match records",
)
