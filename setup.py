from setuptools import find_packages, setup

setup(
    name="svgsharp",
    version="0.1.0",
    description="Streaming SVG interpreter producing resolved drawing primitives",
    packages=find_packages(include=["svgsharp", "svgsharp.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "Pillow>=10.1.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
