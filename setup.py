#!/usr/bin/env python3

from setuptools import find_namespace_packages, setup

if __name__ == '__main__':
    setup(
        name='asyncutil',
        version='0.1.0',
        description=(
            'Cooperative synchronization primitives for asyncio:'
            ' notify, semaphores, locks, conditions, barriers and queues'
        ),
        license='ISC',
        package_dir={'': 'src'},
        packages=find_namespace_packages(where='src'),
        python_requires='>=3.8',
        install_requires=[
            'sniffio>=1.3.0',
            'typing-extensions>=4.6.0',
            'wrapt>=1.16.0',
        ],
        extras_require={
            'test': [
                'pytest>=8.0',
            ],
            'docs': [
                'myst-parser',
                'packaging',
                'sphinx',
                'sphinx-rtd-theme',
            ],
        },
    )
