#!/usr/bin/env python
"""
Copyright 2019 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

from setuptools import find_packages, setup

from oasforge import __version__

install_requires = [
    'pydantic>=2.6',
    'pydantic-core',
    'structlog>=23.1',
    'twisted>=22.10',
    'pyyaml>=6.0',
    'configargparse>=1.5',
    'typing-extensions>=4.6',
]

setup(
    name='oasforge',
    version=__version__,
    description='Declarative transforms for OpenAPI documents of Twisted web APIs',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache License 2.0',
    python_requires='>=3.10',
    entry_points={
        'console_scripts': ['oasforge-openapi=oasforge.cli.openapi_json:main'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    packages=find_packages(exclude=('oasforge_tests', 'oasforge_tests.*')),
    install_requires=install_requires,
    extras_require={
        'test': ['pytest>=7.0'],
    },
)
