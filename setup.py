#!/usr/bin/env python3

from pathlib import Path
from setuptools import setup, find_packages

setup(
    name='gerbdecode',
    version='0.3.0',
    author='jaseg, XenGi',
    author_email='gerbonara@jaseg.de',
    description='Interpreter for Gerber RS-274D/RS-274X files that reconstructs lines, arcs, flashes and regions',
    long_description=Path('README.md').read_text(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'gerbdecode.tests']),
    include_package_data=True,
    install_requires=['click', 'rtree'],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'gerbdecode = gerbdecode.cli:cli',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: Manufacturing',
        'License :: OSI Approved :: Apache Software License',
        'Natural Language :: English',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Topic :: Printing',
        'Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)',
        'Topic :: Utilities',
    ],
    keywords='gerber rs274x rs274d pcb',
    python_requires='>=3.10',
)
