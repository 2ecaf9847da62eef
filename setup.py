"""
Setup script for Higa.

An asynchronous client for the Discord REST API with a per-client
read-through cache.
"""

from setuptools import setup, find_packages
import os
import re

# Get version from __init__.py
def get_version():
    init_path = os.path.join(os.path.dirname(__file__), 'higa', '__init__.py')
    if os.path.exists(init_path):
        with open(init_path, 'r', encoding='utf-8') as f:
            content = f.read()
            version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", content, re.M)
            if version_match:
                return version_match.group(1)
    return "0.1.0"

# Read the README file for long description
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "Higa - An asynchronous Discord REST API client."

# Read requirements from requirements.txt, filtering out test dependencies
def read_requirements():
    requirements_path = os.path.join(os.path.dirname(__file__), 'requirements.txt')
    requirements = []
    test_packages = {'pytest', 'pytest-asyncio'}
    
    if os.path.exists(requirements_path):
        with open(requirements_path, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#'):
                    name = re.split(r'[<>=!~\[ ]', line, 1)[0].lower()
                    if name not in test_packages:
                        requirements.append(line)
    return requirements or ["aiohttp>=3.9.0", "PyYAML>=6.0.1"]

setup(
    name="higa",
    version=get_version(),
    author="Higa Team",
    description="Asynchronous Discord REST API client with a read-through cache",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    url="https://github.com/fantomitechno/Higa",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Communications :: Chat",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Framework :: AsyncIO",
    ],
    python_requires=">=3.9",
    install_requires=read_requirements(),
    extras_require={
        "test": [
            "pytest>=8.2.2",
            "pytest-asyncio>=0.23.7",
        ],
    },
    zip_safe=False,
    keywords="discord api rest client asyncio cache",
)
