import re

import setuptools

with open("tuyair/core/core.py", "r") as fh:
    version_tuple = re.search(r"^version_tuple = \((\d+), (\d+), (\d+)\)", fh.read(), re.M).groups()
__version__ = ".".join(version_tuple)

with open("README.md", "r") as fh:
    long_description = fh.read()

INSTALL_REQUIRES = [
    'requests',      # Used for the HVAC detection service
    'colorama',      # Makes ANSI escape character sequences work under MS Windows.
]

setuptools.setup(
    name="tuyair",
    version=__version__,
    author="tuyair",
    description="Python module to control infrared appliances through a Tuya Zigbee IR blaster",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=("tests",)),
    install_requires=INSTALL_REQUIRES,
    extras_require={
        'test': ['pytest'],
        'completion': ['argcomplete'],
    },
    entry_points={"console_scripts": ["tuyair=tuyair.__main__:dummy"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
