"""
Setup configuration for rclone-wrapper
"""

from setuptools import setup, find_packages
import os


# Read README
def read_file(filename):
    with open(os.path.join(os.path.dirname(__file__), filename), encoding='utf-8') as f:
        return f.read()


setup(
    name='rclone-wrapper',
    version='1.0.0',
    description='rclone wrapper - mount, unmount and auto-mount rclone remotes',
    long_description=read_file('README.md'),
    long_description_content_type='text/markdown',
    license='Apache License 2.0',

    packages=find_packages(exclude=['tests', 'tests.*']),

    install_requires=[
        'click>=8.1.3',
        'tabulate>=0.9.0',
        'psutil>=5.9.0',
        'python-json-logger>=2.0.7',
    ],

    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-cov>=4.1.0',
            'pytest-mock>=3.11.1',
            'mock>=5.1.0',
        ],
    },

    entry_points={
        'console_scripts': [
            'rclone-wrapper=rclone_wrapper.cli.main:main',
        ],
    },

    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
    ],
    python_requires='>=3.8',
)
