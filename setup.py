from setuptools import setup, find_packages

setup(
    name="visual-regression",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "numpy",
        "pillow",
        "opencv-python-headless",
        "pyyaml",
        "python-json-logger>=2.0,<4",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
)
