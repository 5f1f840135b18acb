from setuptools import setup, find_namespace_packages

setup(
    name="kaniko-build",
    version="0.1",
    packages=find_namespace_packages(
        where="src", include=["cli*", "kaniko*", "parsers*", "utils*"]
    ),
    package_dir={"": "src"},
    py_modules=["main"],
    install_requires=[
        'PyYAML',
        'docker',
        'python-dotenv',
        'click',
    ],
    extras_require={
        "test": [
            'pytest',
            'pytest-cov',
        ],
    },
    entry_points={
        "console_scripts": [
            "kaniko-build=main:cli",
        ],
    },
    description="Build container images with the kaniko executor",
    python_requires=">=3.8",
)
