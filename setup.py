"""Setup script for the aiodisposal package."""

from setuptools import setup, find_packages

requires = []

extras_require = {"test": ["anyio>=3.0.0", "pytest>=6.0"]}

__version__ = None
exec(open("src/aiodisposal/version.py").read())

setup(
    name="aiodisposal",
    version=__version__,
    description="Aggregates synchronous and asynchronous cleanup actions",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.8",
    include_package_data=True,
    install_requires=requires,
    extras_require=extras_require,
    test_suite="test",
)
