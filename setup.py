from setuptools import setup, find_packages

setup(
    name="engraving_solver",
    version="0.1.0",
    packages=find_packages(include=["engraving_solver", "engraving_solver.*"]),
    package_data={"engraving_solver": ["configs/*.yaml"]},
    install_requires=[
        "numpy",
        "PyYAML",
        "matplotlib",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "engraving-solver=engraving_solver.scripts.run_solver:main",
        ]
    },
)
