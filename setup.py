from setuptools import setup, find_packages
import re

# Read version from payoutcalc/__init__.py
with open('payoutcalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='payout-calc',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'payoutcalc.sdk': ['*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'payout-calc=payoutcalc.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Vendor payout forecasting from pay cycle rules.',
    python_requires='>=3.10',
)
