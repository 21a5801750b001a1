#!/usr/bin/env python
"""
TSS Credential Resolver - Secret Server credentials for orchestration platforms

Resolves secrets stored in Thycotic/Delinea Secret Server through the tss
command line SDK and republishes them as the fixed credential fields an
orchestration platform's MID server expects.
"""

import os
from setuptools import setup, find_packages

# Read the README for long description
here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

# Version
VERSION = '1.0.0'

setup(
    name='tss-credential-resolver',
    version=VERSION,
    description='Secret Server credential resolver using the tss SDK client',
    long_description=long_description,
    long_description_content_type='text/markdown',

    license='MIT',

    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: System Administrators',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Security',
        'Topic :: System :: Systems Administration',
    ],

    keywords='secret server thycotic delinea credentials vault discovery',

    packages=find_packages(exclude=['tests', 'tests.*', 'examples']),

    python_requires='>=3.10',

    install_requires=[
        'PyYAML>=6.0',
    ],

    extras_require={
        'dev': [
            'pytest>=7.0',
        ],
    },

    # Entry points for CLI commands
    entry_points={
        'console_scripts': [
            'tssresolver=tssresolver.cli.main:main',
        ],
    },
)
