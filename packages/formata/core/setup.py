from setuptools import find_namespace_packages, setup

# Physical layout under packages/ matches the import path
packages = find_namespace_packages(where="../..", include=["formata.core", "formata.core.*"])

setup(
    name="formata-core",
    packages=packages,
    package_dir={"": "../.."},
)
