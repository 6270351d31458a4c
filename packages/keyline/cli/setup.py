from setuptools import find_packages, setup

# Find all packages - physical structure matches import path
packages = find_packages(where="../..", include=["keyline.cli", "keyline.cli.*"])

setup(
    name="keyline-cli",
    packages=packages,
    package_dir={"": "../.."},
    install_requires=["keyline-core", "rich>=13.0"],
    entry_points={"console_scripts": ["keyline=keyline.cli.main:main"]},
)
