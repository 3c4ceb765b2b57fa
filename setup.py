from setuptools import setup, find_packages


setup(
    name="hogdump",
    version="0.1",
    packages=find_packages(include=["hogdump", "hogdump.*"]),
    description="Extract, create and list Descent HOG archive files.",
    author="vercingetorx",
    python_requires=">=3.8",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "hogdump=hogdump.cli:main",
        ]
    },
)
