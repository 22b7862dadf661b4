"""
Setup script for Fourier Viewer
Interactive Fourier analysis visualization for periodic and custom signals
"""

from setuptools import setup, find_namespace_packages
import os

# Read the long description from README
def read_long_description():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return ""

# Read requirements
def read_requirements():
    req_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    if os.path.exists(req_path):
        with open(req_path, 'r', encoding='utf-8') as f:
            return [line.strip() for line in f if line.strip() and not line.startswith('#')]
    return []

setup(
    name='fourier-viewer',
    version='1.0.0',
    author='Fourier Viewer Team',
    description='Fourier analysis visualization: signal approximation, error, coefficients and spectrum',
    long_description=read_long_description(),
    long_description_content_type='text/markdown',
    packages=find_namespace_packages(include=['core', 'ops', 'viz', 'report', 'ui']),
    py_modules=[
        'app',
        'config',
        'helpers',
    ],
    include_package_data=True,
    install_requires=read_requirements(),
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=3.0.0',
            'black>=22.0.0',
            'flake8>=4.0.0',
            'mypy>=0.950',
        ],
    },
    entry_points={
        'console_scripts': [
            'fourier-viewer=app:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'Intended Audience :: Education',
        'Topic :: Scientific/Engineering :: Visualization',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'Environment :: Web Environment',
    ],
    python_requires='>=3.8',
    keywords='fourier harmonics spectrum signal visualization plotly dash',
)
