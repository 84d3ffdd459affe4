from setuptools import find_packages, setup

setup(
    name="fem-solid",
    version="0.1.0",
    description="Element assembly engine for 3D finite-strain solids with 10-node tetrahedra",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "scipy",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "fem-solid=fem_solid.cli.run_solver:main",
        ],
    },
)
