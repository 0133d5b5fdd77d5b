from setuptools import find_namespace_packages, setup

# Physical layout under packages/ matches the import path
packages = find_namespace_packages(where="../..", include=["formata.cli", "formata.cli.*"])

setup(
    name="formata-cli",
    packages=packages,
    package_dir={"": "../.."},
)
