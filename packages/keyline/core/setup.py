from setuptools import find_packages, setup

# Find all packages - physical structure matches import path
packages = find_packages(where="../..", include=["keyline.core", "keyline.core.*"])

setup(
    name="keyline-core",
    packages=packages,
    package_dir={"": "../.."},
    install_requires=["pydantic>=2.6", "pyyaml>=6.0", "tinycss2>=1.2"],
)
