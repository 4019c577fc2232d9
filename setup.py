#!/usr/bin/env python
# -*- coding: utf-8 -*-

import pathlib
import re
import sys
from setuptools import find_packages, setup

if sys.version_info < (3, 8):
    raise RuntimeError("Oxyscraper SDK requires Python 3.8+")

HERE = pathlib.Path(__file__).parent

MODULE = 'oxyscraper'
PACKAGE = 'oxyscraper-sdk'

txt = (HERE / MODULE / '__init__.py').read_text('utf-8')

try:
    version = re.findall(r"^__version__ = '([^']+)'\r?$", txt, re.M)[0]
except IndexError:
    raise RuntimeError('Unable to determine version.')

install_requires = [
    'decorator>=4.2.0',
    'requests>=2.25.0',
    'python-dateutil>=2.7,<3.0.0',
    'loguru>=0.5',
    'urllib3>=1.26.0',
]

def read(f):
    return (HERE / f).read_text('utf-8').strip()

EXTRA_DEPENDENCIES = {
    'develop': [
        'bumpversion',
        'isort',
        'readme_renderer',
        'twine',
        'setuptools',
        'wheel',
    ],
    'test': [
        'pytest>=7.0',
    ],
    'parser': [
        'lxml',
        'beautifulsoup4',
        'soupsieve',
    ],
}

all_deps = set()
for env, deps in EXTRA_DEPENDENCIES.items():
    if env in ('develop', 'test'): continue

    [all_deps.add(dep) for dep in deps]

EXTRA_DEPENDENCIES['all'] = list(all_deps)

setup(
    name=PACKAGE,
    version=version,
    description='Python SDK for the Oxylabs scraper APIs, realtime and push-pull',
    keywords=['scraping', 'web scraping', 'serp', 'ecommerce', 'data', 'sdk', 'oxylabs'],
    author='Oxyscraper Contributors',
    license='MIT',
    long_description=read('README.md'),
    long_description_content_type="text/markdown",
    classifiers=[
        'Intended Audience :: Developers',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: Internet'
    ],
    packages=find_packages(exclude=('tests', 'tests.*', 'examples', 'examples.*')),
    python_requires='>=3.8',
    install_requires=install_requires,
    extras_require=EXTRA_DEPENDENCIES,
    include_package_data=True,
)
