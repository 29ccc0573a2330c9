#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

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

from primio import __version__

install_requires = [
    'pydantic>=2.0',
    'PyYAML>=6.0',
    'structlog>=23.1',
    'typing_extensions>=4.12',
]

setup(
    name='primio',
    version=__version__,
    description='Fixed-width primitive I/O over byte buffers and byte streams',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache-2.0',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    python_requires='>=3.11',
    packages=find_packages(exclude=('primio_tests', 'primio_tests.*')),
    package_data={
        'primio.conf': ['*.yml'],
    },
    install_requires=install_requires,
    extras_require={
        'test': ['pytest>=7.0'],
    },
)
