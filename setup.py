#
# (c) Copyright 2022 by Coinkite Inc. This file is covered by license found in COPYING-CC.
#
#
# Extended keys and transaction input signing
#

import re

# version without importing package (it needs the crypto library)
with open("cksign/__init__.py") as fh:
    __version__ = re.search(r"__version__ = '(.*?)'", fh.read()).group(1)

# To use this command to install and yet be able to edit the code (here). Great for dev:
#
#   pip install --editable .
#
# with cli dependencies
#
#   pip install --editable '.[cli]'
#
# with test dependencies
#
#   pip install --editable '.[test]'
#
from setuptools import setup

# these minimum versions are tested, some earlier values would probably work too.
requirements = [
    'coincurve>=15.0.1',
    'pycryptodomex>=3.10',
    'base58>=2.1.0',
    'cbor2>=5.4.1',
]

cli_requirements = [
    'click>=8.0.3',
]

test_requirements = [
    'pytest',
] + cli_requirements

with open("README.md", "r") as fh:
    long_description = fh.read()

setup(
    name='coinkite-sign',
    version=__version__,
    packages=[ 'cksign' ],
    python_requires='>3.6.0',
    install_requires=requirements,
    extras_require={
        'cli': cli_requirements,
        'test': test_requirements,
    },
    url='https://github.com/coinkite/coinkite-tap-proto',
    author='Coinkite Inc.',
    author_email='support@coinkite.com',
    description="Encode BIP-32 extended keys and sign transaction inputs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    entry_points='''
        [console_scripts]
        cksign=cksign.cli:main
    ''',
    classifiers=[
        'Operating System :: POSIX :: Linux',
        'Operating System :: Microsoft :: Windows',
        'Operating System :: MacOS :: MacOS X',
    ],
)
