"""
Driver Lifetime Value
Estimates what one additional driver is worth to a ridesharing platform
"""

from setuptools import setup, find_packages
import os

# Read the contents of README file
this_directory = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_directory, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name="driver-ltv",
    version="1.0.0",
    description="Driver lifetime value estimation from ride donation records",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pandas>=1.5.0",
        "numpy>=1.21.0",
        "scikit-learn>=1.1.0",
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
        "tqdm>=4.65.0",
        "joblib>=1.3.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "black>=22.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "driver-ltv=driver_ltv.analysis.estimate_dlv:main",
            "driver-ltv-generate=driver_ltv.data_generation.synthetic_rides:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
