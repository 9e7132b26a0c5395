import setuptools

with open("README.md", "r", encoding="utf8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="pyitc",
    version="0.1",
    author="Igor Pawelec",
    author_email="igor.pawelec@student.urk.edu.pl",
    description="Individual tree crown segmentation from CHM, imagery and LiDAR data",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="GPLv3",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy>=1.23",
        "scipy>=1.9",
        "scikit-image>=0.20",
        "rasterio>=1.3",
        "numba>=0.60",
        "fiona>=1.9",
        "shapely>=2.0",
        "laspy>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["pyitc=pyitc.cli:main"],
    },
    python_requires=">=3.10",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Operating System :: OS Independent",
    ],
    include_package_data=True,
)
