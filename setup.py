from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = [line for line in f.read().splitlines() if line and not line.startswith("#")]

setup(
    name="ridelink",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["server"],
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest",
            "responses",
        ],
    },
    entry_points={
        "console_scripts": [
            "ridelink=ridelink.cli_module.cli:main",
            "ridelink-server=server:cli",
        ],
    },
)
