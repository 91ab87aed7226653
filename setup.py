from setuptools import setup, find_packages

setup(
    name="massing-footprint-engine",
    version="0.1.0",
    packages=find_packages(),
    install_requires=[
        "numpy",
        "pandas",
        "shapely>=2.0",
        "matplotlib",
        "seaborn",
        "pydantic>=2.0",
        "pyproj"
    ],
    extras_require={
        "test": ["pytest"]
    }
)
