"""
Setup file for print-gtfs-rt.

Installs the print_gtfs_rt package and the print-gtfs-rt command.
"""

import setuptools

setuptools.setup(
    name='print-gtfs-rt',
    version='1.0.0',
    description='Decode a GTFS-Realtime feed and print it as text, NDJSON or JSON',
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.9',
    install_requires=[
        'protobuf>=3.20',
        'gtfs-realtime-bindings>=1.0.0',
        'requests>=2.28',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'print-gtfs-rt=print_gtfs_rt.cli:run',
        ],
    },
)
